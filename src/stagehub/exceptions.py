"""Domain exception hierarchy for the stage event hub."""

from __future__ import annotations


class StageHubError(RuntimeError):
    """Base class for all domain-level stagehub errors."""


class ConfigValidationError(StageHubError):
    """Raised when configuration cannot be validated safely."""


class CueValidationError(StageHubError):
    """Raised when a show cue fails validation while being built."""


class DisplayError(StageHubError):
    """Raised when a display sink cannot draw a frame."""


class RegistrationError(StageHubError):
    """Raised when a node cannot be added to a hub registry."""


class InvalidNodeNameError(RegistrationError):
    """Raised when a node is registered with an empty name."""


class DuplicateNodeError(RegistrationError):
    """Raised when a different node already holds the requested name."""


class NodeNotFoundError(StageHubError):
    """Raised by strict sends when the target name is not registered."""


class NodeNotBoundError(StageHubError):
    """Raised when a node tries to originate events before registration."""
