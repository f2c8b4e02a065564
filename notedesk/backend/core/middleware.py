"""
Request Context Middleware.

Middleware for request tracking, timing, frontend identification, and context propagation.
"""

import uuid

import structlog
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from notedesk.backend.core.logging import get_logger
from notedesk.backend.core.utils import utc_now

logger = get_logger(__name__)

# Should align with VALID_SOURCES in logging.py
KNOWN_FRONTENDS = {"web", "cli", "api", "internal"}


class RequestContextMiddleware(BaseHTTPMiddleware):
    """
    Middleware that adds request context to every request.

    Headers:
    - X-Request-ID: Unique request identifier (generated if not provided)
    - X-Frontend-ID: Frontend source identifier (web, cli, api, internal)
    - X-Response-Time: Response duration in milliseconds

    Every log line emitted while the request is handled carries
    request_id, frontend, method and path. Handlers can read
    request.state.request_id and request.state.frontend.
    """

    def __init__(self, app, log_requests: bool = True) -> None:
        super().__init__(app)
        self.log_requests = log_requests

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())

        frontend = request.headers.get("X-Frontend-ID", "unknown").lower()
        if frontend not in KNOWN_FRONTENDS:
            frontend = "unknown"

        start_time = utc_now()

        request.state.request_id = request_id
        request.state.frontend = frontend
        request.state.start_time = start_time

        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(
            request_id=request_id,
            frontend=frontend,
            method=request.method,
            path=request.url.path,
        )

        try:
            response = await call_next(request)

            duration_ms = int((utc_now() - start_time).total_seconds() * 1000)
            response.headers["X-Request-ID"] = request_id
            response.headers["X-Response-Time"] = f"{duration_ms}ms"

            if self.log_requests:
                logger.info(
                    "Request completed",
                    extra={
                        "status_code": response.status_code,
                        "duration_ms": duration_ms,
                    },
                )

            return response

        except Exception as exc:
            duration_ms = int((utc_now() - start_time).total_seconds() * 1000)
            logger.error(
                "Request failed with exception",
                extra={
                    "duration_ms": duration_ms,
                    "error_type": type(exc).__name__,
                },
            )
            raise

        finally:
            structlog.contextvars.clear_contextvars()
