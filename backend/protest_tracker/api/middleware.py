"""
Request middleware: request logging/timing and schema readiness.
"""

import time
import uuid

import structlog
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from protest_tracker.core.logging import get_logger
from protest_tracker.db.init_db import SchemaInitError, ensure_db_ready

logger = get_logger(__name__)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Binds a request id (reused from X-Request-ID when the client sends one)
    plus method and path to structlog's context, then logs one line per
    request with its status and duration.
    """

    async def dispatch(self, request: Request, call_next) -> Response:
        request_id = request.headers.get("X-Request-ID") or uuid.uuid4().hex[:8]
        start_time = time.perf_counter()

        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(
            request_id=request_id,
            method=request.method,
            path=request.url.path,
        )

        try:
            response = await call_next(request)
        except Exception as e:
            logger.error(
                "request_failed",
                error=str(e),
                duration_ms=round((time.perf_counter() - start_time) * 1000, 2),
            )
            raise

        duration_ms = round((time.perf_counter() - start_time) * 1000, 2)
        if response.status_code >= 500:
            log = logger.error
        elif response.status_code >= 400:
            log = logger.warning
        else:
            log = logger.info
        log("request_completed", status_code=response.status_code, duration_ms=duration_ms)

        response.headers["X-Request-ID"] = request_id
        response.headers["X-Response-Time"] = f"{duration_ms}ms"
        return response


class SchemaReadyMiddleware(BaseHTTPMiddleware):
    """
    Holds every request until the one-shot schema initialization has finished.

    If initialization failed, the failure is cached and every request is
    answered with a 500 until the process restarts.
    """

    async def dispatch(self, request: Request, call_next) -> Response:
        try:
            await ensure_db_ready()
        except SchemaInitError as e:
            logger.error("request_rejected_schema_unavailable", error=str(e))
            return JSONResponse(
                status_code=500,
                content={"detail": "Server failed to initialize."},
            )
        return await call_next(request)
