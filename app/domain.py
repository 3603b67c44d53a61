"""Domain types for the lake status widget.

Snapshots are frozen: a refresh builds a new WidgetStatus rather than
editing the cached one.
"""

from __future__ import annotations

import datetime as dt
from dataclasses import dataclass

from app.errors import ParseError


@dataclass(frozen=True)
class TimestampedValue:
    """One telemetry sample with its instant in UTC and a local-time label."""
    instant_utc: dt.datetime  # timezone-aware, UTC
    local_time_label: str  # e.g. "2024-05-01 07:00 -05:00"
    value: float


@dataclass(frozen=True)
class Trend:
    """The latest sample and the one before it."""
    current: TimestampedValue
    previous: TimestampedValue

    def __post_init__(self) -> None:
        if self.current.instant_utc <= self.previous.instant_utc:
            raise ParseError(
                "Trend samples out of order",
                context={
                    "current": self.current.instant_utc.isoformat(),
                    "previous": self.previous.instant_utc.isoformat(),
                },
            )

    @property
    def delta(self) -> float:
        """Change from previous to current, rounded to two decimals."""
        return round(self.current.value - self.previous.value, 2)


@dataclass(frozen=True)
class WeatherNow:
    """Current short-term forecast conditions."""
    summary: str
    temperature_f: float


@dataclass(frozen=True)
class WidgetStatus:
    """Everything the widget shows, assembled in one population cycle."""
    lake_level: Trend
    tailwater: Trend
    weather: WeatherNow
