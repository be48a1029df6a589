"""Node contract: anything with a stable name that can receive events."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

from .events import Event

if TYPE_CHECKING:
    from .hub import EventHub


class Node(ABC):
    """Base class for hub participants.

    A node is unbound until a hub registers it; registration binds it to that
    hub so it can originate events later. The reference is non-owning: the hub
    owns the registry, nodes only point back at it.
    """

    def __init__(self, name: str) -> None:
        self._name = name
        self._hub: EventHub | None = None

    @property
    def name(self) -> str:
        """Registry key, fixed for the lifetime of the node."""
        return self._name

    @property
    def hub(self) -> EventHub | None:
        return self._hub

    @property
    def is_bound(self) -> bool:
        return self._hub is not None

    def bind(self, hub: EventHub) -> None:
        """Attach the hub this node was registered with."""
        self._hub = hub

    @abstractmethod
    def receive(self, event: Event) -> None:
        """Handle an event delivered by the hub."""

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._name!r})"
