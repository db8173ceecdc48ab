import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from app.core.exceptions import TripPlannerError
from app.core.logging import redact_share_path

logger = logging.getLogger(__name__)


async def handle_trip_planner_error(request: Request, exc: TripPlannerError) -> JSONResponse:
    """Render a service exception as ``{"error": ..., "code": ...}``."""
    # Share routes carry a bearer secret in the path
    path = redact_share_path(request.url.path)

    if exc.status_code >= 500:
        logger.error(f"[Error] {exc.error_code.value} on {request.method} {path}: {exc.message}")
    else:
        logger.info(f"[Error] {exc.error_code.value} on {request.method} {path}")

    body = {"error": exc.message, "code": exc.error_code.value}
    body.update(exc.details)
    return JSONResponse(status_code=exc.status_code, content=body)


def register_error_handlers(application: FastAPI) -> None:
    application.add_exception_handler(TripPlannerError, handle_trip_planner_error)
