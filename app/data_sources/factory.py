"""Factory helpers for building the upstream clients at startup."""

from __future__ import annotations

from typing import Tuple

from app import config
from app.data_sources.cwms_client import CwmsClient
from app.data_sources.nws_client import NwsClient
from utils.logging_utils import get_tagged_logger

logger = get_tagged_logger(__name__, tag="data_sources/factory")


def build_telemetry_source(settings: config.Settings | None = None) -> CwmsClient:
    """Instantiate the CWMS client from settings."""
    settings = settings or config.settings
    logger.info(f"Using CWMS telemetry at {settings.cwms_base_url}")
    return CwmsClient(
        settings.cwms_base_url,
        timeout=settings.http_timeout_seconds,
        tz_name=settings.local_timezone,
    )


def build_weather_source(settings: config.Settings | None = None) -> NwsClient:
    """Instantiate the NWS client from settings."""
    settings = settings or config.settings
    logger.info(f"Using NWS weather at {settings.nws_base_url}")
    return NwsClient(
        settings.nws_base_url,
        user_agent=settings.nws_user_agent,
        timeout=settings.http_timeout_seconds,
    )


def build_data_sources(settings: config.Settings | None = None) -> Tuple[CwmsClient, NwsClient]:
    """Return the (telemetry, weather) pair the aggregator needs."""
    settings = settings or config.settings
    return build_telemetry_source(settings), build_weather_source(settings)
