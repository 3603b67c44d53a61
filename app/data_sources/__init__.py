"""Upstream clients for telemetry and weather data."""

from .base import TelemetrySource, WeatherSource
from .cwms_client import CwmsClient, SkippedRow, decode_row, last_two
from .factory import build_data_sources, build_telemetry_source, build_weather_source
from .nws_client import NwsClient

__all__ = [
    "build_data_sources",
    "build_telemetry_source",
    "build_weather_source",
    "TelemetrySource",
    "WeatherSource",
    "CwmsClient",
    "NwsClient",
    "SkippedRow",
    "decode_row",
    "last_two",
]
