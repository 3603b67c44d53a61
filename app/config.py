"""Application configuration pulled from environment variables via pydantic."""
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Environment-driven configuration for the lake status widget."""
    model_config = SettingsConfigDict(env_prefix="WIDGET_", extra="ignore")

    # USACE CWMS telemetry
    cwms_base_url: str = "https://cwms-data.usace.army.mil/cwms-data"
    office: str = "SWL"
    lake_series: str = "Bull_Shoals_Dam-Headwater.Elev.Inst.1Hour.0.Decodes-rev"
    tailwater_series: str = "Bull_Shoals_Dam-Tailwater.Elev-Downstream.Inst.1Hour.0.Decodes-rev"
    units: str = "ft"
    lookback_hours: int = 12

    # National Weather Service
    nws_base_url: str = "https://api.weather.gov"
    nws_user_agent: str = "BullShoalsWidget/1.0 (you@example.com)"
    latitude: float = 36.3647
    longitude: float = -92.5781

    local_timezone: str = "America/Chicago"
    status_ttl_seconds: int = 300
    http_timeout_seconds: float = 10.0
    log_level: str = "INFO"

    @field_validator("cwms_base_url", "nws_base_url", mode="after")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        """Normalize base URLs to avoid double slashes."""
        return str(v).rstrip("/")

    @field_validator("local_timezone", mode="after")
    @classmethod
    def check_timezone(cls, v: str) -> str:
        """Reject zone names the tz database does not know."""
        try:
            ZoneInfo(v)
        except (ZoneInfoNotFoundError, ValueError) as exc:
            raise ValueError(f"Unknown timezone: {v}") from exc
        return v


settings = Settings()
