"""HTTP API for the lake status widget."""

from datetime import datetime

from fastapi import APIRouter, Depends, Request
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from .domain import TimestampedValue, Trend, WidgetStatus
from .status_service import StatusService
from utils.logging_utils import get_tagged_logger

logger = get_tagged_logger(__name__, tag="app/api")


class _CamelModel(BaseModel):
    """Response model serialized with camelCase keys."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class TimestampedValueResponse(_CamelModel):
    """One telemetry sample."""
    instant_utc: datetime
    local_time_label: str
    value: float


class TrendResponse(_CamelModel):
    """Latest two samples of a series and their rounded difference."""
    current: TimestampedValueResponse
    previous: TimestampedValueResponse
    delta: float


class WeatherNowResponse(_CamelModel):
    """Current short-term forecast."""
    summary: str
    temperature_f: float


class WidgetStatusResponse(_CamelModel):
    """Full payload for GET /api/status."""
    lake_level: TrendResponse
    tailwater: TrendResponse
    weather: WeatherNowResponse

    @classmethod
    def from_status(cls, status: WidgetStatus) -> "WidgetStatusResponse":
        """Convert a domain snapshot into its wire shape."""
        return cls(
            lake_level=_trend(status.lake_level),
            tailwater=_trend(status.tailwater),
            weather=WeatherNowResponse(
                summary=status.weather.summary,
                temperature_f=status.weather.temperature_f,
            ),
        )


def _point(point: TimestampedValue) -> TimestampedValueResponse:
    return TimestampedValueResponse(
        instant_utc=point.instant_utc,
        local_time_label=point.local_time_label,
        value=point.value,
    )


def _trend(trend: Trend) -> TrendResponse:
    return TrendResponse(current=_point(trend.current), previous=_point(trend.previous), delta=trend.delta)


def get_status_service(request: Request) -> StatusService:
    """Return the StatusService owned by the running app."""
    return request.app.state.status_service


router = APIRouter()


@router.get("/status", response_model=WidgetStatusResponse)
def get_status(service: StatusService = Depends(get_status_service)):
    """Return the cached lake/tailwater/weather snapshot."""
    status = service.get_status()
    logger.debug(f"Serving status with lake level {status.lake_level.current.value}")
    return WidgetStatusResponse.from_status(status)
