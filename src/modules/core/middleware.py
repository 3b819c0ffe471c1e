import uuid
from contextvars import ContextVar
from typing import Callable

import structlog
from django.http import HttpRequest, HttpResponse

correlation_id_var: ContextVar[str] = ContextVar("correlation_id", default="")

logger = structlog.get_logger()

MAX_CORRELATION_ID_LENGTH = 128


class CorrelationIdMiddleware:
    """Attach a correlation ID to every request and every log line.

    Reads ``X-Request-ID`` from the incoming request (truncated to
    ``MAX_CORRELATION_ID_LENGTH``), or generates a UUID4.  The ID is bound
    into structlog contextvars and echoed back in the response header so a
    checkout failure reported by the storefront can be traced in the logs.
    """

    def __init__(self, get_response: Callable[[HttpRequest], HttpResponse]) -> None:
        self.get_response = get_response

    def __call__(self, request: HttpRequest) -> HttpResponse:
        cid = request.META.get("HTTP_X_REQUEST_ID", "")[:MAX_CORRELATION_ID_LENGTH]
        cid = cid or str(uuid.uuid4())
        correlation_id_var.set(cid)

        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(correlation_id=cid)

        logger.info(
            "request_started",
            method=request.method,
            path=request.path,
        )

        response = self.get_response(request)

        logger.info(
            "request_finished",
            method=request.method,
            path=request.path,
            status_code=response.status_code,
        )

        response["X-Request-ID"] = cid
        return response
