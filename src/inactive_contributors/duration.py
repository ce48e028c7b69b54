"""Retention window parsing."""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import datetime, timedelta

_UNITS: dict[str, timedelta] = {
    "h": timedelta(hours=1),
    "d": timedelta(days=1),
    "w": timedelta(weeks=1),
}

# Keeps subtract_from(now) inside the range datetime can represent.
_MAXIMUM_SPAN = timedelta(days=365 * 1000)

_PATTERN = re.compile(r"^(?P<magnitude>\d+)(?P<unit>[a-z]+)$")


class DurationParseError(ValueError):
    """Raised when a retention window expression cannot be parsed."""


@dataclass(frozen=True, slots=True)
class Duration:
    """A non-negative span of time such as ``90d`` or ``2w``."""

    magnitude: int
    unit: str

    def __post_init__(self) -> None:
        if isinstance(self.magnitude, bool) or not isinstance(self.magnitude, int):
            raise DurationParseError(f"Duration magnitude must be a whole number, got {self.magnitude!r}")
        if self.magnitude < 0:
            raise DurationParseError(f"Duration must not be negative, got {self.magnitude}{self.unit}")
        if self.unit not in _UNITS:
            supported = ", ".join(sorted(_UNITS))
            raise DurationParseError(f"Duration unit must be one of {supported}, got {self.unit!r}")
        try:
            span = _UNITS[self.unit] * self.magnitude
        except OverflowError:
            span = None
        if span is None or span > _MAXIMUM_SPAN:
            raise DurationParseError(
                f"Duration {self.magnitude}{self.unit} is out of range; the maximum is {_MAXIMUM_SPAN.days}d"
            )

    @classmethod
    def parse(cls, text: str) -> "Duration":
        """Parse ``<integer><unit>`` where unit is one of ``h``, ``d`` or ``w``."""

        if not isinstance(text, str):
            raise DurationParseError(f"Duration must be a string, got {type(text).__name__}")
        match = _PATTERN.match(text.strip())
        if match is None:
            raise DurationParseError(
                f"Invalid duration '{text}': expected a whole number followed by a unit, e.g. '90d'"
            )
        unit = match.group("unit")
        if unit not in _UNITS:
            supported = ", ".join(sorted(_UNITS))
            raise DurationParseError(f"Invalid duration '{text}': unit must be one of {supported}")
        return cls(magnitude=int(match.group("magnitude")), unit=unit)

    def as_timedelta(self) -> timedelta:
        return _UNITS[self.unit] * self.magnitude

    def subtract_from(self, instant: datetime) -> datetime:
        """Return the instant this duration before ``instant``."""

        return instant - self.as_timedelta()

    def __str__(self) -> str:
        return f"{self.magnitude}{self.unit}"


__all__ = ["Duration", "DurationParseError"]
