"""Fluent builder for validated show cues."""

from __future__ import annotations

from datetime import timedelta
from typing import Annotated, Any

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    TypeAdapter,
    ValidationError,
    field_validator,
)

from .exceptions import CueValidationError

Bpm = Annotated[int, Field(strict=True, ge=1, le=400)]
Percent = Annotated[int, Field(strict=True, ge=0, le=100)]

DEFAULT_BPM = 120

_BPM_ADAPTER: TypeAdapter[int] = TypeAdapter(Bpm)
_PERCENT_ADAPTER: TypeAdapter[int] = TypeAdapter(Percent)


class ShowCue(BaseModel):
    """Immutable, validated description of one show cue."""

    model_config = ConfigDict(frozen=True)

    name: str
    starts_in: timedelta = timedelta(0)
    bpm: Bpm = DEFAULT_BPM
    light_preset: str = ""
    smoke_level_pct: Percent = 0
    screen_text: str = ""
    tags: tuple[str, ...] = ()

    @field_validator("name", mode="before")
    @classmethod
    def _validate_name(cls, value: Any) -> str:
        if not isinstance(value, str):
            raise ValueError("Cue name must be a string.")
        if not value.strip():
            raise ValueError("cue name is required")
        return value

    @field_validator("starts_in")
    @classmethod
    def _validate_starts_in(cls, value: timedelta) -> timedelta:
        if value < timedelta(0):
            raise ValueError("starts_in must not be negative.")
        return value


def _first_error(exc: ValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return str(exc)
    first = errors[0]
    location = ".".join(str(part) for part in first.get("loc", ()))
    message = first.get("msg", "invalid value")
    return f"{location}: {message}" if location else message


class CueBuilder:
    """Collect cue fields step by step and validate on ``build``.

    Bounded numeric setters are checked immediately. The first failure sticks:
    later bounded setters are skipped and ``build`` raises that error.
    """

    def __init__(self, name: str) -> None:
        self._fields: dict[str, Any] = {"name": name}
        self._tags: list[str] = []
        self._error: str | None = None

    @property
    def error(self) -> str | None:
        return self._error

    def starts_in(self, delay: timedelta) -> CueBuilder:
        self._fields["starts_in"] = delay
        return self

    def bpm(self, value: int) -> CueBuilder:
        if self._error is not None:
            return self
        try:
            self._fields["bpm"] = _BPM_ADAPTER.validate_python(value)
        except ValidationError:
            self._error = f"BPM must be in range 1..400, got {value}"
        return self

    def light_preset(self, preset: str) -> CueBuilder:
        self._fields["light_preset"] = preset
        return self

    def smoke_level_pct(self, pct: int) -> CueBuilder:
        if self._error is not None:
            return self
        try:
            self._fields["smoke_level_pct"] = _PERCENT_ADAPTER.validate_python(pct)
        except ValidationError:
            self._error = f"SmokeLevelPct must be in range 0..100, got {pct}"
        return self

    def screen_text(self, text: str) -> CueBuilder:
        self._fields["screen_text"] = text
        return self

    def tag(self, tag: str) -> CueBuilder:
        if tag:
            self._tags.append(tag)
        return self

    def build(self) -> ShowCue:
        """Return the finished cue or raise ``CueValidationError``."""
        if self._error is not None:
            raise CueValidationError(self._error)
        try:
            return ShowCue.model_validate({**self._fields, "tags": tuple(self._tags)})
        except ValidationError as exc:
            raise CueValidationError(_first_error(exc)) from exc
