"""Client for the USACE CWMS time-series API (reservoir and river telemetry)."""
from __future__ import annotations

import datetime as dt
from dataclasses import dataclass
from typing import Any, Optional, Sequence, Union

import requests

from app.data_sources.http import get_json, require_mapping
from app.domain import TimestampedValue, Trend
from app.errors import InsufficientDataError, ParseError, UnexpectedValueTypeError
from app.timestamps import DEFAULT_LOCAL_TIMEZONE, normalize
from utils.logging_utils import get_tagged_logger

logger = get_tagged_logger(__name__, tag="cwms_client")

CWMS_BASE_URL = "https://cwms-data.usace.army.mil/cwms-data"
DEFAULT_LOOKBACK_HOURS = 12


@dataclass(frozen=True)
class SkippedRow:
    """A `values` row that is not a usable [timestamp, number, ...] sample."""
    index: int
    reason: str


RowResult = Union[TimestampedValue, SkippedRow]


def _is_number(value: Any) -> bool:
    """True for JSON numbers; JSON booleans decode to bool and are excluded."""
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def build_point(row: Sequence[Any], tz_name: str = DEFAULT_LOCAL_TIMEZONE) -> TimestampedValue:
    """Turn a [timestamp, value, ...] row into a TimestampedValue."""
    instant, label = normalize(row[0], tz_name)
    value = row[1]
    if not _is_number(value):
        raise UnexpectedValueTypeError(
            "Unexpected value type (expected number)", context={"type": type(value).__name__}
        )
    return TimestampedValue(instant_utc=instant, local_time_label=label, value=float(value))


def decode_row(index: int, row: Any, tz_name: str = DEFAULT_LOCAL_TIMEZONE) -> RowResult:
    """Decode one row, or describe why it is skipped.

    Malformed rows (null, short, non-numeric value) are a known quirk of the
    feed and come back as SkippedRow. A bad timestamp on an otherwise
    well-formed row is not skipped: it raises.
    """
    if not isinstance(row, list) or len(row) < 2:
        return SkippedRow(index, "not an array of at least two elements")
    if not _is_number(row[1]):
        return SkippedRow(index, f"value is {type(row[1]).__name__}, not a number")
    return build_point(row, tz_name)


def last_two(values: Sequence[Any], name: str, tz_name: str = DEFAULT_LOCAL_TIMEZONE) -> Trend:
    """Pick the two most recent numeric rows from an ascending `values` array.

    Scans from the end so the newest samples are found first and stops as
    soon as two are found.
    """
    if len(values) < 2:
        raise InsufficientDataError("Not enough data points", context={"name": name, "rows": len(values)})

    found: list[TimestampedValue] = []
    for index in range(len(values) - 1, -1, -1):
        result = decode_row(index, values[index], tz_name)
        if isinstance(result, SkippedRow):
            logger.debug(f"Skipping row {result.index} of {name}: {result.reason}")
            continue
        found.append(result)
        if len(found) == 2:
            break

    if len(found) < 2:
        raise InsufficientDataError("Not enough numeric points", context={"name": name, "rows": len(values)})

    current, previous = found
    return Trend(current=current, previous=previous)


class CwmsClient:
    """Fetch recent samples of a named CWMS time series."""

    def __init__(
        self,
        base_url: str = CWMS_BASE_URL,
        *,
        session: Optional[requests.Session] = None,
        timeout: float = 10.0,
        tz_name: str = DEFAULT_LOCAL_TIMEZONE,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.tz_name = tz_name
        self.session = session or requests.Session()
        self.session.headers.update({"Accept": "application/json"})

    def fetch_values(
        self,
        office: str,
        name: str,
        unit: str,
        *,
        begin: dt.datetime,
        end: dt.datetime,
    ) -> list:
        """Return the raw `values` array for `name` between `begin` and `end`."""
        params = {
            "office": office,
            "name": name,
            "begin": begin.isoformat(),
            "end": end.isoformat(),
            "unit": unit,
        }
        logger.debug(f"Requesting CWMS series {office}/{name} from {params['begin']} to {params['end']}")
        data = require_mapping(
            get_json(self.session, f"{self.base_url}/timeseries", params=params, timeout=self.timeout),
            "timeseries",
        )
        values = data.get("values")
        if not isinstance(values, list):
            raise ParseError("CWMS response has no values array", context={"name": name})
        return values

    def fetch_trend(
        self,
        office: str,
        name: str,
        unit: str,
        *,
        now: Optional[dt.datetime] = None,
        lookback_hours: int = DEFAULT_LOOKBACK_HOURS,
    ) -> Trend:
        """Return the latest two samples of a series within the lookback window."""
        end = (now or dt.datetime.now(dt.timezone.utc)).astimezone(dt.timezone.utc)
        begin = end - dt.timedelta(hours=lookback_hours)
        values = self.fetch_values(office, name, unit, begin=begin, end=end)
        trend = last_two(values, name, self.tz_name)
        logger.debug(f"{name}: {trend.current.value} at {trend.current.local_time_label} (delta {trend.delta})")
        return trend
