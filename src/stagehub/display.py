"""Display sinks and the visuals that render onto them.

Visuals hold a default display but can be shown on any other one, so the
"what" (a big banner, a lyrics card) varies independently of the "where"
(LED wall, projector).
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence

from rich.console import Console

from .exceptions import DisplayError


class Display(ABC):
    """A named output surface that can draw text frames."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Human-readable identifier of the surface."""

    @abstractmethod
    def draw(self, frame: str) -> None:
        """Draw ``frame``; raise ``DisplayError`` when the output fails."""


class ConsoleDisplay(Display):
    """Display that writes labelled frames to a rich console."""

    def __init__(self, console: Console | None = None) -> None:
        self.console = console or Console()

    def draw(self, frame: str) -> None:
        try:
            self.console.print(
                f"[{self.name}]\n{frame}\n",
                markup=False,
                highlight=False,
                soft_wrap=True,
            )
        except OSError as exc:
            raise DisplayError(f"{self.name} failed to draw: {exc}") from exc


class LEDWall(ConsoleDisplay):
    def __init__(self, wall_id: str, console: Console | None = None) -> None:
        super().__init__(console)
        self.wall_id = wall_id

    @property
    def name(self) -> str:
        return f"LED-WALL#{self.wall_id}"


class Projector(ConsoleDisplay):
    def __init__(self, room: str, console: Console | None = None) -> None:
        super().__init__(console)
        self.room = room

    @property
    def name(self) -> str:
        return f"PROJECTOR({self.room})"


class Visual(ABC):
    """Content that renders to text and is drawn on a display."""

    def __init__(self, display: Display) -> None:
        self.display = display

    @abstractmethod
    def render(self) -> str:
        """Return the frame text for this visual."""

    def show(self) -> None:
        """Draw on the visual's own display."""
        self.display.draw(self.render())

    def show_on(self, display: Display) -> None:
        """Draw on another display without rebinding the visual."""
        display.draw(self.render())


class BigText(Visual):
    def __init__(self, display: Display, text: str) -> None:
        super().__init__(display)
        self.text = text

    def render(self) -> str:
        line = "=" * (len(self.text) + 8)
        return f"{line}\n==  {self.text}  ==\n{line}"


class LyricsCard(Visual):
    def __init__(self, display: Display, title: str, lines: Sequence[str]) -> None:
        super().__init__(display)
        self.title = title
        self.lines = list(lines)

    def render(self) -> str:
        parts = [f"♪ {self.title}", "-" * (len(self.title) + 2)]
        parts.extend(self.lines)
        return "\n".join(parts) + "\n"


class Monitor(ConsoleDisplay):
    """Crew monitor where participants report what they are doing."""

    def __init__(self, label: str = "STAGE", console: Console | None = None) -> None:
        super().__init__(console)
        self.label = label

    @property
    def name(self) -> str:
        return f"MONITOR({self.label})"
