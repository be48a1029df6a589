"""Stock show participants: one originator and a few reactors."""

from __future__ import annotations

from typing import ClassVar
import logging

from .display import Display
from .events import Event, EventKind
from .exceptions import DisplayError, NodeNotBoundError
from .hub import DeliveryReport
from .nodes import Node

LOGGER = logging.getLogger(__name__)


def _kind_label(kind: EventKind | str) -> str:
    return kind.value if isinstance(kind, EventKind) else str(kind)


def _known_kind(kind: EventKind | str) -> EventKind | None:
    try:
        return EventKind(kind)
    except ValueError:
        return None


class Artist(Node):
    """Performer that originates events by broadcasting through its hub."""

    def __init__(self, name: str) -> None:
        super().__init__(name)
        self.received: list[Event] = []

    def receive(self, event: Event) -> None:
        self.received.append(event)
        LOGGER.info(
            "participant.received",
            extra={
                "event": "participant.received",
                "node": self.name,
                "kind": _kind_label(event.kind),
                "origin": event.origin,
                "payload": event.payload,
            },
        )

    def trigger(self, kind: EventKind | str, payload: str = "") -> DeliveryReport:
        """Broadcast a new event from this artist to every other node."""
        if self.hub is None:
            raise NodeNotBoundError(
                f"{self.name!r} must be registered with a hub before triggering events."
            )
        return self.hub.emit(Event(kind=kind, origin=self.name, payload=payload))


class Reactor(Node):
    """Node that reacts to a fixed set of event kinds and ignores the rest.

    Subclasses declare ``reactions``: event kind -> action template. The
    template may reference ``{payload}``.
    """

    label: ClassVar[str] = "Reactor"
    reactions: ClassVar[dict[EventKind, str]] = {}

    def __init__(self, name: str, display: Display | None = None) -> None:
        super().__init__(name)
        self.display = display
        self.received: list[Event] = []
        self.actions: list[str] = []

    def receive(self, event: Event) -> None:
        self.received.append(event)
        kind = _known_kind(event.kind)
        template = self.reactions.get(kind) if kind is not None else None
        if template is None:
            return
        self._act(template.format(payload=event.payload))

    def _act(self, action: str) -> None:
        self.actions.append(action)
        LOGGER.info(
            "participant.action",
            extra={"event": "participant.action", "node": self.name, "action": action},
        )
        if self.display is None:
            return
        try:
            self.display.draw(f"[{self.label}:{self.name}] {action}")
        except DisplayError as exc:
            LOGGER.warning(
                "participant.display_failed",
                extra={
                    "event": "participant.display_failed",
                    "node": self.name,
                    "display": self.display.name,
                    "reason": str(exc),
                },
            )


class LightingRig(Reactor):
    label = "Lights"
    reactions = {
        EventKind.CHORUS: "switching to preset: WIDE-BRIGHT",
        EventKind.DROP: "strobe ON!",
        EventKind.TALK: "warm spotlight",
    }


class SmokeMachine(Reactor):
    label = "Smoke"
    reactions = {EventKind.SMOKE_NOW: "pumping smoke: {payload}"}


class SoundRack(Reactor):
    label = "Sound"
    reactions = {EventKind.DROP: "sub-bass boost!"}
