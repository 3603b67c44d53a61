"""Interfaces for the upstream data sources the aggregator depends on."""

from __future__ import annotations

import datetime as dt
from typing import Optional, Protocol

from app.domain import Trend, WeatherNow


class TelemetrySource(Protocol):
    """Anything that can report the latest trend of a named time series."""

    def fetch_trend(
        self,
        office: str,
        name: str,
        unit: str,
        *,
        now: Optional[dt.datetime] = None,
        lookback_hours: int = 12,
    ) -> Trend:
        """Return the two most recent samples of the series."""
        ...


class WeatherSource(Protocol):
    """Anything that can report current weather for a point."""

    def fetch_current(self, latitude: float, longitude: float) -> WeatherNow:
        """Return current conditions at the given coordinates."""
        ...
