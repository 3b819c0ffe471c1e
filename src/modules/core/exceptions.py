"""Domain error taxonomy and the API error envelope.

Every module raises subclasses of the four categories below.  Views catch
them and render them with ``error_response``; DRF-level failures
(serializer validation, authentication, throttling) go through
``standard_exception_handler`` so every error body has the same shape::

    {
        "type": "validation_error" | "client_error" | "server_error",
        "errors": [{"code": "...", "detail": "...", "attr": "field" | null}]
    }
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

import structlog
from rest_framework import status
from rest_framework.exceptions import APIException, ValidationError
from rest_framework.response import Response
from rest_framework.views import exception_handler

logger = structlog.get_logger(__name__)


class DomainError(Exception):
    """Base class for business-rule violations.

    ``code`` is the stable, machine-readable identifier surfaced to clients.
    """

    code = "DOMAIN_ERROR"
    http_status = status.HTTP_400_BAD_REQUEST
    attr: Optional[str] = None

    def __init__(self, message: str = "", *, attr: Optional[str] = None) -> None:
        super().__init__(message or self.__class__.__doc__ or self.code)
        if attr is not None:
            self.attr = attr


class ValidationFailed(DomainError):
    """Malformed or out-of-range input, rejected before any side effect."""

    code = "VALIDATION_ERROR"
    http_status = status.HTTP_400_BAD_REQUEST


class NotFound(DomainError):
    """A referenced entity does not exist."""

    code = "NOT_FOUND"
    http_status = status.HTTP_404_NOT_FOUND


class Conflict(DomainError):
    """The request is valid but cannot be applied to the current state."""

    code = "CONFLICT"
    http_status = status.HTTP_409_CONFLICT


class InternalFailure(DomainError):
    """Unexpected failure; the message never carries internal detail."""

    code = "INTERNAL_ERROR"
    http_status = status.HTTP_500_INTERNAL_SERVER_ERROR


# ---------------------------------------------------------------------------
# Rendering
# ---------------------------------------------------------------------------


def _error_type(http_status: int) -> str:
    if http_status >= 500:
        return "server_error"
    if http_status == status.HTTP_400_BAD_REQUEST:
        return "validation_error"
    return "client_error"


def error_response(exc: DomainError, code: Optional[str] = None) -> Response:
    """Render a domain error; ``code`` overrides the exception's own code."""
    return Response(
        {
            "type": _error_type(exc.http_status),
            "errors": [
                {
                    "code": code or exc.code,
                    "detail": str(exc),
                    "attr": exc.attr,
                }
            ],
        },
        status=exc.http_status,
    )


def _flatten_validation_errors(
    detail: Any, attr: Optional[str] = None
) -> List[Dict[str, Any]]:
    if isinstance(detail, dict):
        errors: List[Dict[str, Any]] = []
        for key, value in detail.items():
            if key == "non_field_errors":
                child = attr
            elif attr is None:
                child = str(key)
            else:
                child = f"{attr}.{key}"
            errors.extend(_flatten_validation_errors(value, child))
        return errors
    if isinstance(detail, list):
        errors = []
        for index, value in enumerate(detail):
            child = attr
            if isinstance(value, (dict, list)) and attr:
                child = f"{attr}.{index}"
            errors.extend(_flatten_validation_errors(value, child))
        return errors
    return [
        {
            "code": "VALIDATION_ERROR",
            "detail": str(detail),
            "attr": attr,
        }
    ]


def standard_exception_handler(exc: Exception, context: Dict[str, Any]) -> Optional[Response]:
    """DRF ``EXCEPTION_HANDLER`` producing the standard error envelope.

    Domain errors that escape a view are rendered too; anything else that
    DRF does not know about is left to Django (500, logged upstream).
    """
    if isinstance(exc, DomainError):
        return error_response(exc)

    response = exception_handler(exc, context)
    if response is None:
        return None

    if isinstance(exc, ValidationError):
        errors = _flatten_validation_errors(exc.detail)
    elif isinstance(exc, APIException):
        codes = exc.get_codes()
        code = codes if isinstance(codes, str) else exc.default_code
        errors = [{"code": code.upper(), "detail": str(exc.detail), "attr": None}]
    else:
        # Django Http404 / PermissionDenied, already mapped to a status by DRF
        code = "NOT_FOUND" if response.status_code == 404 else "PERMISSION_DENIED"
        errors = [{"code": code, "detail": str(response.data.get("detail", "")), "attr": None}]

    logger.info(
        "api.request_rejected",
        status_code=response.status_code,
        codes=[error["code"] for error in errors],
    )
    response.data = {"type": _error_type(response.status_code), "errors": errors}
    return response
