"""Wire a cue, the stage displays and the hub participants into one show."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from datetime import timedelta
import logging
import time
from typing import Any

from rich.console import Console

from .cues import CueBuilder, ShowCue
from .display import BigText, Display, LEDWall, LyricsCard, Monitor, Projector, Visual
from .events import Event, EventKind
from .exceptions import DisplayError
from .hub import EventHub
from .participants import Artist, LightingRig, SmokeMachine, SoundRack

LOGGER = logging.getLogger(__name__)

HUB_ORIGIN = "HUB"


@dataclass
class Show:
    """Everything a running show needs, built from config."""

    cue: ShowCue
    hub: EventHub
    artist: Artist
    lights: LightingRig
    smoke: SmokeMachine
    sound: SoundRack
    led_wall: LEDWall
    projector: Projector
    monitor: Monitor
    lyrics: list[str]
    lyrics_title: str


def _present(visual: Visual, display: Display | None = None) -> None:
    """Draw a visual; a failing screen is logged and the show goes on."""
    target = display or visual.display
    try:
        visual.show_on(target)
    except DisplayError as exc:
        LOGGER.warning(
            "show.visual.failed",
            extra={
                "event": "show.visual.failed",
                "visual": type(visual).__name__,
                "display": target.name,
                "reason": str(exc),
            },
        )


def build_cue(show_config: dict[str, Any]) -> ShowCue:
    """Build the show cue; raises ``CueValidationError`` on bad values."""
    builder = (
        CueBuilder(show_config["cue_name"])
        .starts_in(timedelta(seconds=show_config["starts_in_seconds"]))
        .bpm(show_config["bpm"])
        .light_preset(show_config["light_preset"])
        .smoke_level_pct(show_config["smoke_level_pct"])
        .screen_text(show_config["screen_text"])
    )
    for tag in show_config["tags"]:
        builder.tag(tag)
    return builder.build()


def build_show(config: dict[str, Any], console: Console | None = None) -> Show:
    """Construct displays, hub and participants and register every node."""
    show_config = config["show"]
    cue = build_cue(show_config)
    console = console or Console()

    monitor = Monitor(console=console)
    hub = EventHub.from_config(config["hub"])
    show = Show(
        cue=cue,
        hub=hub,
        artist=Artist("MC"),
        lights=LightingRig("MainRig", display=monitor),
        smoke=SmokeMachine("Fogger-01", display=monitor),
        sound=SoundRack("Rack-Sub", display=monitor),
        led_wall=LEDWall(show_config["led_wall_id"], console=console),
        projector=Projector(show_config["projector_room"], console=console),
        monitor=monitor,
        lyrics=list(show_config["lyrics"]),
        lyrics_title=show_config["lyrics_title"],
    )
    for node in (show.artist, show.lights, show.smoke, show.sound):
        hub.register(node)
    return show


def run_show(
    config: dict[str, Any],
    console: Console | None = None,
    sleep: Callable[[float], None] = time.sleep,
) -> Show:
    """Play the opener: visuals first, then the event sequence through the hub."""
    console = console or Console()
    show = build_show(config, console=console)
    pause = float(config["show"]["step_pause_seconds"])
    cue = show.cue

    console.print(
        f"BUILT CUE: {cue.name} | bpm: {cue.bpm} | lights: {cue.light_preset}"
        f" | smoke: {cue.smoke_level_pct} %",
        markup=False,
        highlight=False,
    )
    LOGGER.info(
        "show.cue.built",
        extra={"event": "show.cue.built", "cue": cue.name, "tags": list(cue.tags)},
    )

    big = BigText(show.led_wall, cue.screen_text)
    lyrics = LyricsCard(show.projector, show.lyrics_title, show.lyrics)
    _present(big)
    _present(big, show.projector)
    _present(lyrics)
    _present(lyrics, show.led_wall)

    show.artist.trigger(EventKind.TALK, "Welcome to the show!")
    sleep(pause)

    show.artist.trigger(EventKind.CHORUS, "Go!")
    sleep(pause)

    show.hub.send(
        show.smoke.name,
        Event(
            kind=EventKind.SMOKE_NOW,
            origin=HUB_ORIGIN,
            payload=f"{cue.smoke_level_pct}%",
        ),
    )

    show.artist.trigger(EventKind.DROP, "DROP NOW!!!")
    sleep(pause)

    LOGGER.info("show.finished", extra={"event": "show.finished", "cue": cue.name})
    return show
