"""Client for the National Weather Service API (api.weather.gov)."""
from __future__ import annotations

from typing import Optional

import requests

from app.data_sources.http import get_json, require_mapping
from app.domain import WeatherNow
from app.errors import MissingForecastUrlError, ParseError, UnexpectedValueTypeError
from utils.logging_utils import get_tagged_logger

logger = get_tagged_logger(__name__, tag="nws_client")

NWS_BASE_URL = "https://api.weather.gov"
DEFAULT_SUMMARY = "Forecast"


class NwsClient:
    """Resolve current hourly-forecast conditions for a point."""

    def __init__(
        self,
        base_url: str = NWS_BASE_URL,
        *,
        user_agent: str,
        session: Optional[requests.Session] = None,
        timeout: float = 10.0,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()
        # NWS rejects requests without an identifying User-Agent.
        self.session.headers.update({"Accept": "application/geo+json", "User-Agent": user_agent})

    def forecast_url(self, latitude: float, longitude: float) -> str:
        """Look up the hourly forecast endpoint for a lat/lon point."""
        url = f"{self.base_url}/points/{latitude},{longitude}"
        logger.debug(f"Resolving NWS forecast endpoint via {url}")
        data = require_mapping(get_json(self.session, url, timeout=self.timeout), "points")
        properties = data.get("properties")
        forecast_url = properties.get("forecastHourly") if isinstance(properties, dict) else None
        if not isinstance(forecast_url, str) or not forecast_url.strip():
            raise MissingForecastUrlError(
                "NWS forecastHourly URL missing", context={"lat": latitude, "lon": longitude}
            )
        return forecast_url.strip()

    def fetch_current(self, latitude: float, longitude: float) -> WeatherNow:
        """Return the first hourly forecast period as the current conditions."""
        url = self.forecast_url(latitude, longitude)
        data = require_mapping(get_json(self.session, url, timeout=self.timeout), "forecast")
        properties = require_mapping(data.get("properties"), "properties")
        periods = properties.get("periods")
        if not isinstance(periods, list) or not periods:
            raise ParseError("NWS forecast has no periods", context={"url": url})
        first = require_mapping(periods[0], "periods[0]")

        if "temperature" not in first or first["temperature"] is None:
            raise ParseError("NWS forecast period has no temperature", context={"url": url})
        temperature = first["temperature"]
        if isinstance(temperature, bool) or not isinstance(temperature, (int, float)):
            raise UnexpectedValueTypeError(
                "Unexpected temperature type (expected number)",
                context={"type": type(temperature).__name__},
            )

        summary = first.get("shortForecast")
        if summary is None:
            summary = DEFAULT_SUMMARY
        elif not isinstance(summary, str):
            raise UnexpectedValueTypeError(
                "Unexpected shortForecast type (expected string)",
                context={"type": type(summary).__name__},
            )
        weather = WeatherNow(summary=summary, temperature_f=float(temperature))
        logger.debug(f"NWS current conditions: {weather.summary}, {weather.temperature_f}F")
        return weather
