"""Top-level package for stagehub."""

from __future__ import annotations

from importlib import import_module
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from .config import ensure_config_dir, load_config
    from .cues import CueBuilder, ShowCue
    from .display import BigText, Display, LEDWall, LyricsCard, Monitor, Projector
    from .events import Event, EventKind
    from .exceptions import (
        ConfigValidationError,
        CueValidationError,
        DisplayError,
        DuplicateNodeError,
        InvalidNodeNameError,
        NodeNotBoundError,
        NodeNotFoundError,
        RegistrationError,
        StageHubError,
    )
    from .hub import DeliveryReport, DeliveryStatus, DuplicatePolicy, EventHub
    from .nodes import Node
    from .participants import Artist, LightingRig, Reactor, SmokeMachine, SoundRack

_EXPORTS: dict[str, str] = {
    "ensure_config_dir": ".config",
    "load_config": ".config",
    "CueBuilder": ".cues",
    "ShowCue": ".cues",
    "BigText": ".display",
    "Display": ".display",
    "LEDWall": ".display",
    "LyricsCard": ".display",
    "Monitor": ".display",
    "Projector": ".display",
    "Event": ".events",
    "EventKind": ".events",
    "ConfigValidationError": ".exceptions",
    "CueValidationError": ".exceptions",
    "DisplayError": ".exceptions",
    "DuplicateNodeError": ".exceptions",
    "InvalidNodeNameError": ".exceptions",
    "NodeNotBoundError": ".exceptions",
    "NodeNotFoundError": ".exceptions",
    "RegistrationError": ".exceptions",
    "StageHubError": ".exceptions",
    "DeliveryReport": ".hub",
    "DeliveryStatus": ".hub",
    "DuplicatePolicy": ".hub",
    "EventHub": ".hub",
    "Node": ".nodes",
    "Artist": ".participants",
    "LightingRig": ".participants",
    "Reactor": ".participants",
    "SmokeMachine": ".participants",
    "SoundRack": ".participants",
}

__all__ = sorted(_EXPORTS)


def __getattr__(name: str) -> Any:
    """Lazily import symbols so ``import stagehub`` stays cheap."""
    module_name = _EXPORTS.get(name)
    if module_name is None:
        raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
    return getattr(import_module(module_name, __name__), name)
