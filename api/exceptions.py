"""
API exception handlers.

This module provides custom exception handling for REST API responses.
"""

import logging
from typing import Any, Dict, Optional

from django.http import Http404
from rest_framework import status
from rest_framework.exceptions import APIException
from rest_framework.response import Response
from rest_framework.views import exception_handler

from core.domain.exceptions import (
    CmsLicenseNotFoundError,
    DomainException,
    InvalidEditionHandleError,
    InvalidPluginHandleError,
    LicenseAlreadyClaimedError,
    LicenseNotFoundError,
    LicensePersistenceError,
    LicenseValidationError,
)
from core.metrics import errors_total

logger = logging.getLogger(__name__)

_STATUS_BY_EXCEPTION = (
    (
        (
            LicenseNotFoundError,
            CmsLicenseNotFoundError,
            InvalidPluginHandleError,
            InvalidEditionHandleError,
        ),
        status.HTTP_404_NOT_FOUND,
    ),
    ((LicenseAlreadyClaimedError,), status.HTTP_409_CONFLICT),
    ((LicenseValidationError,), status.HTTP_400_BAD_REQUEST),
    ((LicensePersistenceError,), status.HTTP_500_INTERNAL_SERVER_ERROR),
)


def custom_exception_handler(exc: Exception, context: Dict[str, Any]) -> Response:
    """Custom exception handler for REST API."""
    trace_id = _get_trace_id(context)

    if isinstance(exc, DomainException):
        response = _handle_domain_exception(exc, context, trace_id)
    elif isinstance(exc, APIException):
        response = exception_handler(exc, context)
        code = exc.default_code.upper().replace("-", "_")
        detail = response.data.get("detail", exc.default_detail) if isinstance(
            response.data, dict
        ) else response.data
        response.data = {"error": {"code": code, "message": detail}}
    elif isinstance(exc, Http404):
        response = Response(
            {"error": {"code": "NOT_FOUND", "message": "Resource not found"}},
            status=status.HTTP_404_NOT_FOUND,
        )
    else:
        response = _handle_unexpected_exception(exc, context, trace_id)

    if trace_id:
        response["X-Trace-ID"] = trace_id
    return response


def _get_trace_id(context: Dict[str, Any]) -> Optional[str]:
    """Extract trace ID from request context."""
    request = context.get("request")
    if not request:
        return None
    return getattr(request, "trace_id", getattr(request, "correlation_id", None))


def _endpoint(context: Dict[str, Any]) -> str:
    view = context.get("view")
    return type(view).__name__ if view else "unknown"


def _status_for(exc: DomainException) -> int:
    for exception_types, status_code in _STATUS_BY_EXCEPTION:
        if isinstance(exc, exception_types):
            return status_code
    return status.HTTP_400_BAD_REQUEST


def _handle_domain_exception(
    exc: DomainException, context: Dict[str, Any], trace_id: Optional[str]
) -> Response:
    """Handle domain-specific exceptions."""
    status_code = _status_for(exc)
    errors_total.labels(error_type=exc.code, endpoint=_endpoint(context)).inc()

    if status_code >= 500:
        logger.error(
            "Domain exception: %s - %s",
            exc.code,
            exc.message,
            extra={"trace_id": trace_id},
            exc_info=exc,
        )
        message = "An internal error occurred"
    else:
        logger.warning(
            "Domain exception: %s - %s", exc.code, exc.message, extra={"trace_id": trace_id}
        )
        message = exc.message

    body = {"error": {"code": exc.code, "message": message}}
    if isinstance(exc, LicenseValidationError) and exc.errors:
        body["error"]["details"] = exc.errors
    return Response(body, status=status_code)


def _handle_unexpected_exception(
    exc: Exception, context: Dict[str, Any], trace_id: Optional[str]
) -> Response:
    """Handle unexpected or untracked exceptions."""
    logger.error("Unexpected error: %s", exc, extra={"trace_id": trace_id}, exc_info=exc)
    errors_total.labels(error_type=type(exc).__name__, endpoint=_endpoint(context)).inc()
    return Response(
        {"error": {"code": "INTERNAL_ERROR", "message": "An internal error occurred"}},
        status=status.HTTP_500_INTERNAL_SERVER_ERROR,
    )
