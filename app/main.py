"""FastAPI application setup for the lake status widget."""

from fastapi import FastAPI, Request
from fastapi.responses import PlainTextResponse

from .api import router as api_router
from .config import settings
from .data_sources import build_data_sources
from .errors import WidgetError
from .status_service import StatusService
from utils.logging_utils import get_tagged_logger

logger = get_tagged_logger(__name__, tag="app/main")


def create_app(service: StatusService | None = None) -> FastAPI:
    """Build the app around `service`, or one wired to the real upstream APIs."""
    if service is None:
        telemetry, weather = build_data_sources(settings)
        service = StatusService(telemetry, weather, settings)

    app = FastAPI(title="Lake Status Widget")
    app.state.status_service = service

    @app.exception_handler(WidgetError)
    async def _widget_error(request: Request, exc: WidgetError):
        """Upstream/parsing failures surface as a bare 500."""
        logger.error(f"Failed to build status for {request.url.path}: {type(exc).__name__}: {exc}")
        return PlainTextResponse("Internal Server Error", status_code=500)

    app.include_router(api_router, prefix="/api")
    return app


app = create_app()
