"""Normalize telemetry timestamps to UTC instants and local display labels.

CWMS rows carry timestamps either as ISO-8601 strings or as Unix epochs, and
epochs show up in both seconds and milliseconds depending on the endpoint
version. Numbers above EPOCH_MILLIS_THRESHOLD are read as milliseconds.
That threshold is a heuristic: no upstream documentation guarantees it, but
second-based epochs stay below it until roughly the year 33658 while
millisecond epochs for any date after 2001 exceed it.
"""
from __future__ import annotations

import datetime as dt
from typing import Any, Tuple
from zoneinfo import ZoneInfo

from app.errors import ParseError, UnsupportedTypeError

EPOCH_MILLIS_THRESHOLD = 1_000_000_000_000
DEFAULT_LOCAL_TIMEZONE = "America/Chicago"

_UNIX_EPOCH = dt.datetime(1970, 1, 1, tzinfo=dt.timezone.utc)


def _parse_iso(s: str) -> dt.datetime:
    """Parse an ISO-8601 string; values without an offset are taken as UTC."""
    try:
        parsed = dt.datetime.fromisoformat(s.strip())
    except ValueError as exc:
        raise ParseError("Unparseable ISO-8601 timestamp", context={"value": s}) from exc
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=dt.timezone.utc)
    return parsed.astimezone(dt.timezone.utc)


def _from_epoch(n: int | float) -> dt.datetime:
    """Interpret a Unix epoch in seconds or milliseconds (truncated toward zero)."""
    try:
        raw = int(n)
    except (OverflowError, ValueError) as exc:  # inf / nan
        raise ParseError("Epoch timestamp is not finite", context={"value": n}) from exc
    try:
        if abs(raw) > EPOCH_MILLIS_THRESHOLD:
            return _UNIX_EPOCH + dt.timedelta(milliseconds=raw)
        return _UNIX_EPOCH + dt.timedelta(seconds=raw)
    except OverflowError as exc:
        raise ParseError("Epoch timestamp out of range", context={"value": n}) from exc


def to_utc(raw: Any) -> dt.datetime:
    """Convert a JSON timestamp (string or number) to an aware UTC datetime."""
    # bool is an int subclass but never a timestamp
    if isinstance(raw, bool):
        raise UnsupportedTypeError("Unsupported timestamp JSON type", context={"type": "bool"})
    if isinstance(raw, str):
        return _parse_iso(raw)
    if isinstance(raw, (int, float)):
        return _from_epoch(raw)
    raise UnsupportedTypeError(
        "Unsupported timestamp JSON type", context={"type": type(raw).__name__}
    )


def _format_offset(offset: dt.timedelta | None) -> str:
    """Render a UTC offset as ±hh:mm."""
    total_minutes = int((offset or dt.timedelta(0)).total_seconds() // 60)
    sign = "-" if total_minutes < 0 else "+"
    hours, minutes = divmod(abs(total_minutes), 60)
    return f"{sign}{hours:02d}:{minutes:02d}"


def local_label(instant: dt.datetime, tz_name: str = DEFAULT_LOCAL_TIMEZONE) -> str:
    """Render `instant` in `tz_name` as 'YYYY-MM-DD HH:MM ±hh:mm'."""
    local = instant.astimezone(ZoneInfo(tz_name))
    return f"{local:%Y-%m-%d %H:%M} {_format_offset(local.utcoffset())}"


def normalize(raw: Any, tz_name: str = DEFAULT_LOCAL_TIMEZONE) -> Tuple[dt.datetime, str]:
    """Return the UTC instant for `raw` and its local-time label."""
    instant = to_utc(raw)
    return instant, local_label(instant, tz_name)
