"""
common.exceptions
~~~~~~~~~~~~~~~~~
Centralised DRF exception handler and custom exception classes.

Request-shape errors (400, 405) are answered with a plain-text reason; every
other :class:`AppError` is rendered as ``{"code": ..., "detail": ...}``.
"""
from __future__ import annotations

from collections.abc import Iterable

import structlog
from django.http import HttpResponse
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler as drf_exception_handler

logger = structlog.get_logger(__name__)


class AppError(Exception):
    """Base application error.  Subclass to define domain-specific errors."""

    status_code: int = status.HTTP_400_BAD_REQUEST
    default_code: str = "error"
    default_detail: str = "An error occurred."
    #: Render the detail as a ``text/plain`` body instead of JSON.
    plain_text: bool = False

    def __init__(self, detail: str | None = None, code: str | None = None) -> None:
        self.detail = detail or self.default_detail
        self.code = code or self.default_code
        super().__init__(self.detail)

    def __str__(self) -> str:
        return self.detail

    def headers(self) -> dict[str, str]:
        """Extra response headers for this error."""
        return {}


class BadRequestError(AppError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_code = "bad_request"
    default_detail = "Bad request."
    plain_text = True


class MethodNotAllowedError(AppError):
    """The HTTP verb is not served by the endpoint; lists the verbs that are."""

    status_code = status.HTTP_405_METHOD_NOT_ALLOWED
    default_code = "method_not_allowed"
    plain_text = True

    def __init__(self, method: str, allowed: Iterable[str]) -> None:
        self.method = method
        self.allowed: list[str] = list(allowed)
        super().__init__(f"method {method} not allowed")

    def headers(self) -> dict[str, str]:
        return {"Allow": ", ".join(self.allowed)}


class BackendError(AppError):
    """A failure reported by the authoritative store, surfaced unchanged."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_code = "backend_error"
    default_detail = "The config entry backend failed."


def custom_exception_handler(exc: Exception, context: dict) -> HttpResponse | None:
    """
    Global DRF exception handler.
    Converts AppError subclasses to responses and delegates everything
    else to the default DRF handler so standard DRF exceptions still work.
    """
    if isinstance(exc, AppError):
        logger.warning(
            "app_error",
            code=exc.code,
            detail=exc.detail,
            status_code=exc.status_code,
        )
        if exc.plain_text:
            response = HttpResponse(
                exc.detail,
                status=exc.status_code,
                content_type="text/plain; charset=utf-8",
            )
        else:
            response = Response(
                {"code": exc.code, "detail": exc.detail},
                status=exc.status_code,
            )
        for header, value in exc.headers().items():
            response[header] = value
        return response

    response = drf_exception_handler(exc, context)
    if response is not None:
        logger.warning(
            "drf_error",
            detail=response.data,
            status_code=response.status_code,
        )
    else:
        logger.exception("unhandled_exception", exc_info=exc)

    return response
