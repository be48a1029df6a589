"""Event records exchanged through the hub."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import Enum


class EventKind(str, Enum):
    """Kinds of show events understood by the stock participants."""

    CHORUS = "CHORUS"
    DROP = "DROP"
    TALK = "TALK"
    SMOKE_NOW = "SMOKE_NOW"


@dataclass(frozen=True)
class Event:
    """Immutable message record.

    ``dispatched_at`` belongs to the hub: whatever the caller puts there is
    overwritten on dispatch, so receivers always see the hub's timestamp.
    """

    kind: EventKind | str
    origin: str = ""
    payload: str = ""
    dispatched_at: datetime | None = field(default=None, compare=False)

    def stamped(self, at: datetime) -> Event:
        """Return a copy carrying the given dispatch timestamp."""
        return replace(self, dispatched_at=at)
