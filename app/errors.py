"""Exceptions raised while building the widget status.

None of these are retried: each one aborts the current population attempt
and reaches the HTTP layer as a 500.
"""

from typing import Any, Dict, Optional


class WidgetError(Exception):
    """Base class for every failure raised by the adapters and aggregator."""

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        self.context = context or {}
        super().__init__(message)

    def __str__(self) -> str:
        message = super().__str__()
        if not self.context:
            return message
        context_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
        return f"{message} ({context_str})"


class ParseError(WidgetError):
    """Malformed timestamp, body that is not JSON, or a missing required field."""


class UnsupportedTypeError(WidgetError):
    """A timestamp arrived as a JSON type that is neither string nor number."""


class UnexpectedValueTypeError(WidgetError):
    """A JSON value that must be numeric was something else."""


class InsufficientDataError(WidgetError):
    """Fewer than two usable samples in a telemetry series."""


class MissingForecastUrlError(WidgetError):
    """The NWS points lookup did not name an hourly forecast endpoint."""


class TransportError(WidgetError):
    """Network failure or non-2xx response from an upstream API."""
