"""Synchronous in-process event hub (mediator).

Usage:
    hub = EventHub()
    hub.register(Artist("MC"))
    hub.register(LightingRig("MainRig"))

    # Broadcast to everyone except the origin
    hub.emit(Event(kind=EventKind.CHORUS, origin="MC", payload="Go!"))

    # Deliver to exactly one node
    hub.send("MainRig", Event(kind=EventKind.DROP, origin="HUB"))

Dispatch runs on the caller's stack: ``emit`` and ``send`` return only after
every recipient's ``receive`` has returned. A node that emits from inside
``receive`` triggers nested dispatch on the same stack. Nesting is unbounded
unless the hub is built with ``max_dispatch_depth``.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
import logging
from typing import Any

from .events import Event
from .exceptions import DuplicateNodeError, InvalidNodeNameError, NodeNotFoundError
from .nodes import Node

LOGGER = logging.getLogger(__name__)

Clock = Callable[[], datetime]


class DuplicatePolicy(str, Enum):
    """What ``register`` does when a different node already holds the name."""

    REJECT = "reject"
    REPLACE = "replace"


class DeliveryStatus(str, Enum):
    DELIVERED = "DELIVERED"
    NO_RECIPIENTS = "NO_RECIPIENTS"
    NOT_FOUND = "NOT_FOUND"
    DEPTH_EXCEEDED = "DEPTH_EXCEEDED"


@dataclass(frozen=True)
class DeliveryReport:
    """Outcome of a single ``emit`` or ``send`` call."""

    event: Event
    status: DeliveryStatus
    recipients: frozenset[str] = field(default_factory=frozenset)

    @property
    def delivered(self) -> bool:
        return self.status is DeliveryStatus.DELIVERED


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class EventHub:
    """Owns the name -> node registry and dispatches events to it.

    Recipient order within a broadcast is unspecified. Callers may rely on the
    set of recipients, never on the sequence.
    """

    def __init__(
        self,
        duplicate_policy: DuplicatePolicy | str = DuplicatePolicy.REJECT,
        max_dispatch_depth: int | None = None,
        clock: Clock | None = None,
    ) -> None:
        if max_dispatch_depth is not None and max_dispatch_depth < 1:
            raise ValueError("max_dispatch_depth must be a positive integer or None.")
        self.duplicate_policy = DuplicatePolicy(duplicate_policy)
        self.max_dispatch_depth = max_dispatch_depth
        self._clock: Clock = clock or _utc_now
        self._nodes: dict[str, Node] = {}
        self._depth = 0

    @classmethod
    def from_config(cls, hub_config: dict[str, Any]) -> EventHub:
        """Build a hub from the ``[hub]`` section of a loaded config."""
        return cls(
            duplicate_policy=hub_config.get("duplicate_policy", DuplicatePolicy.REJECT),
            max_dispatch_depth=hub_config.get("max_dispatch_depth"),
        )

    def __len__(self) -> int:
        return len(self._nodes)

    def __contains__(self, name: object) -> bool:
        return name in self._nodes

    def __iter__(self) -> Iterator[Node]:
        return iter(list(self._nodes.values()))

    def names(self) -> frozenset[str]:
        return frozenset(self._nodes)

    def get(self, name: str) -> Node | None:
        return self._nodes.get(name)

    @property
    def dispatch_depth(self) -> int:
        """Number of dispatch passes currently on the stack."""
        return self._depth

    def register(self, node: Node) -> None:
        """Add ``node`` to the registry and bind it to this hub.

        Raises:
            InvalidNodeNameError: the node's name is empty or blank.
            DuplicateNodeError: another node holds the name and the policy is
                ``REJECT``.
        """
        name = node.name
        if not isinstance(name, str) or not name.strip():
            raise InvalidNodeNameError(f"Node name must be a non-empty string, got {name!r}.")

        existing = self._nodes.get(name)
        if existing is not None and existing is not node:
            if self.duplicate_policy is DuplicatePolicy.REJECT:
                raise DuplicateNodeError(f"A node named {name!r} is already registered.")
            LOGGER.warning(
                "hub.register.replaced",
                extra={
                    "event": "hub.register.replaced",
                    "node": name,
                    "previous": type(existing).__name__,
                    "replacement": type(node).__name__,
                },
            )

        self._nodes[name] = node
        node.bind(self)
        LOGGER.debug(
            "hub.register",
            extra={"event": "hub.register", "node": name, "size": len(self._nodes)},
        )

    def emit(self, event: Event) -> DeliveryReport:
        """Broadcast ``event`` to every registered node except its origin."""
        stamped = event.stamped(self._clock())
        # Snapshot so registrations made by recipients do not disturb this pass.
        recipients = [
            (name, node)
            for name, node in list(self._nodes.items())
            if name != stamped.origin
        ]
        return self._dispatch(stamped, recipients)

    def send(self, target: str, event: Event) -> DeliveryReport:
        """Deliver ``event`` to the node named ``target`` only.

        An unknown target is reported (logged, ``NOT_FOUND`` status) and never
        raised.
        """
        stamped = event.stamped(self._clock())
        node = self._nodes.get(target)
        if node is None:
            LOGGER.warning(
                "hub.send.not_found",
                extra={
                    "event": "hub.send.not_found",
                    "target": target,
                    "kind": str(getattr(stamped.kind, "value", stamped.kind)),
                    "origin": stamped.origin,
                },
            )
            return DeliveryReport(event=stamped, status=DeliveryStatus.NOT_FOUND)
        return self._dispatch(stamped, [(target, node)])

    def send_or_raise(self, target: str, event: Event) -> DeliveryReport:
        """Like ``send`` but raise ``NodeNotFoundError`` for an unknown target."""
        report = self.send(target, event)
        if report.status is DeliveryStatus.NOT_FOUND:
            raise NodeNotFoundError(f"Node {target!r} is not registered.")
        return report

    def _dispatch(
        self, event: Event, recipients: list[tuple[str, Node]]
    ) -> DeliveryReport:
        if self.max_dispatch_depth is not None and self._depth >= self.max_dispatch_depth:
            LOGGER.warning(
                "hub.dispatch.depth_exceeded",
                extra={
                    "event": "hub.dispatch.depth_exceeded",
                    "depth": self._depth,
                    "limit": self.max_dispatch_depth,
                    "origin": event.origin,
                },
            )
            return DeliveryReport(event=event, status=DeliveryStatus.DEPTH_EXCEEDED)

        if not recipients:
            LOGGER.debug(
                "hub.dispatch.no_recipients",
                extra={"event": "hub.dispatch.no_recipients", "origin": event.origin},
            )
            return DeliveryReport(event=event, status=DeliveryStatus.NO_RECIPIENTS)

        self._depth += 1
        try:
            for _, node in recipients:
                node.receive(event)
        finally:
            self._depth -= 1

        return DeliveryReport(
            event=event,
            status=DeliveryStatus.DELIVERED,
            recipients=frozenset(name for name, _ in recipients),
        )
