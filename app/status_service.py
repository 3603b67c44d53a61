"""Assemble the widget status from telemetry and weather, behind a TTL cache."""
from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor

from app import config
from app.data_sources.base import TelemetrySource, WeatherSource
from app.domain import WidgetStatus
from app.status_cache import StatusCache
from utils.logging_utils import get_tagged_logger

logger = get_tagged_logger(__name__, tag="status_service")


class StatusService:
    """Owns the status cache and the upstream clients that feed it."""

    def __init__(
        self,
        telemetry: TelemetrySource,
        weather: WeatherSource,
        settings: config.Settings | None = None,
        *,
        cache: StatusCache[WidgetStatus] | None = None,
    ) -> None:
        self.telemetry = telemetry
        self.weather = weather
        self.settings = settings or config.settings
        self.cache = cache or StatusCache(self.build_status, ttl_seconds=self.settings.status_ttl_seconds)

    def _fetch_series(self, name: str):
        s = self.settings
        return self.telemetry.fetch_trend(s.office, name, s.units, lookback_hours=s.lookback_hours)

    def build_status(self) -> WidgetStatus:
        """Fetch lake level, tailwater and weather in parallel; all or nothing."""
        s = self.settings
        logger.info(f"Building widget status for {s.office} ({s.latitude}, {s.longitude})")
        with ThreadPoolExecutor(max_workers=3, thread_name_prefix="status-fetch") as pool:
            lake = pool.submit(self._fetch_series, s.lake_series)
            tail = pool.submit(self._fetch_series, s.tailwater_series)
            weather = pool.submit(self.weather.fetch_current, s.latitude, s.longitude)
            # .result() re-raises the adapter's own exception
            status = WidgetStatus(
                lake_level=lake.result(),
                tailwater=tail.result(),
                weather=weather.result(),
            )
        logger.info(
            f"Lake {status.lake_level.current.value} ({status.lake_level.delta:+}), "
            f"tailwater {status.tailwater.current.value} ({status.tailwater.delta:+}), "
            f"{status.weather.summary} {status.weather.temperature_f}F"
        )
        return status

    def get_status(self) -> WidgetStatus:
        """Return the cached status, refreshing it when stale."""
        return self.cache.get()
