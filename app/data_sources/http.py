"""Shared GET-and-decode helper for the upstream API clients."""
from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Optional

import requests

from app.errors import ParseError, TransportError


def get_json(
    session: requests.Session,
    url: str,
    *,
    params: Optional[Mapping[str, Any]] = None,
    timeout: float = 10.0,
) -> Any:
    """GET `url` and return the decoded JSON body.

    Network failures and non-2xx statuses raise TransportError; a body that
    is not JSON raises ParseError. Nothing is retried.
    """
    try:
        resp = session.get(url, params=params, timeout=timeout)
        resp.raise_for_status()
    except requests.RequestException as exc:
        status = getattr(getattr(exc, "response", None), "status_code", None)
        raise TransportError(
            "Upstream request failed", context={"url": url, "status": status, "error": str(exc)}
        ) from exc

    try:
        return resp.json()
    except ValueError as exc:
        raise ParseError("Upstream response is not valid JSON", context={"url": url}) from exc


def require_mapping(value: Any, field: str) -> Mapping[str, Any]:
    """Return `value` if it is a JSON object, otherwise raise ParseError."""
    if not isinstance(value, Mapping):
        raise ParseError("Expected a JSON object", context={"field": field})
    return value
