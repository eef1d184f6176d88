"""Request middleware: correlation ids and per-action access logging."""

import time
from uuid import uuid4

import structlog
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

CORRELATION_HEADER = "X-Correlation-Id"
WIDGET_PREFIX = "/widget/"

logger = structlog.get_logger(__name__)


def widget_action(request: Request) -> str:
    """Name the widget action a request performs, e.g. 'POST search'.

    Path parameters collapse so that every day selection logs as one
    action. Requests outside the widget router use their raw path.
    """
    path = request.url.path
    if not path.startswith(WIDGET_PREFIX):
        return f"{request.method} {path}"
    parts = path[len(WIDGET_PREFIX):].strip("/").split("/")
    if parts[0] == "days" and len(parts) > 1 and parts[1].isdigit():
        parts[1] = "{index}"
    return f"{request.method} {'/'.join(parts)}"


class CorrelationIdMiddleware(BaseHTTPMiddleware):
    """Tag every request with a correlation id and log its outcome.

    The id comes from the X-Correlation-Id header or a fresh UUID4. It is
    stored on ``request.state``, bound to the structlog context together
    with the widget action, and echoed on the response.
    """

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        correlation_id = request.headers.get(CORRELATION_HEADER) or str(uuid4())
        request.state.correlation_id = correlation_id
        action = widget_action(request)

        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(
            correlation_id=correlation_id,
            widget_action=action,
        )

        started = time.perf_counter()
        response = await call_next(request)
        response.headers[CORRELATION_HEADER] = correlation_id

        logger.info(
            "widget_request_completed",
            status_code=response.status_code,
            duration_ms=round((time.perf_counter() - started) * 1000, 1),
        )
        return response
