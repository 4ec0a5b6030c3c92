"""
API exception handlers.

This module provides custom exception handling for REST API responses.
"""

import logging
from typing import Any, Dict, Optional

from django.http import Http404
from rest_framework import status
from rest_framework.exceptions import APIException, ValidationError
from rest_framework.response import Response
from rest_framework.views import exception_handler

from core.domain.exceptions import (
    ConfirmationRequiredError,
    DomainException,
    DuplicateProductNameError,
    InventoryValidationError,
    ProductManagementForbiddenError,
    ProductNotFoundError,
    RemoteInventoryError,
)
from core.metrics import inventory_validation_failures_total

logger = logging.getLogger(__name__)


def custom_exception_handler(exc: Exception, context: Dict[str, Any]) -> Response:
    """Custom exception handler for REST API."""
    correlation_id = _get_correlation_id(context)

    if isinstance(exc, DomainException):
        response = _handle_domain_exception(exc, correlation_id)
    elif isinstance(exc, ValidationError):
        response = exception_handler(exc, context)
        response.data = {
            "error": {
                "code": "VALIDATION_ERROR",
                "message": "Invalid request",
                "fields": response.data,
            }
        }
    elif isinstance(exc, APIException):
        response = exception_handler(exc, context)
        code = exc.default_code.upper().replace("-", "_")
        response.data = {
            "error": {"code": code, "message": response.data.get("detail", exc.default_detail)}
        }
    elif isinstance(exc, Http404):
        response = Response(
            {"error": {"code": "NOT_FOUND", "message": "Resource not found"}},
            status=status.HTTP_404_NOT_FOUND,
        )
    else:
        response = _handle_unexpected_exception(exc, context, correlation_id)

    if correlation_id:
        response["X-Correlation-ID"] = correlation_id
    return response


def _get_correlation_id(context: Dict[str, Any]) -> Optional[str]:
    """Extract correlation ID from request context."""
    request = context.get("request")
    if not request:
        return None
    return getattr(request, "correlation_id", None)


def _status_for(exc: DomainException) -> int:
    if isinstance(exc, DuplicateProductNameError):
        return status.HTTP_409_CONFLICT
    if isinstance(exc, (InventoryValidationError, ConfirmationRequiredError)):
        return status.HTTP_400_BAD_REQUEST
    if isinstance(exc, ProductNotFoundError):
        return status.HTTP_404_NOT_FOUND
    if isinstance(exc, ProductManagementForbiddenError):
        return status.HTTP_403_FORBIDDEN
    if isinstance(exc, RemoteInventoryError):
        return status.HTTP_502_BAD_GATEWAY
    return status.HTTP_400_BAD_REQUEST


def _handle_domain_exception(exc: DomainException, correlation_id: Optional[str]) -> Response:
    """Handle domain-specific exceptions."""
    status_code = _status_for(exc)
    if isinstance(exc, InventoryValidationError):
        inventory_validation_failures_total.labels(code=exc.code).inc()

    if status_code >= 500:
        logger.error(
            "Domain exception: %s - %s", exc.code, exc.message,
            extra={"correlation_id": correlation_id},
        )
    else:
        logger.warning(
            "Domain exception: %s - %s", exc.code, exc.message,
            extra={"correlation_id": correlation_id},
        )
    return Response({"error": {"code": exc.code, "message": exc.message}}, status=status_code)


def _handle_unexpected_exception(
    exc: Exception, context: Dict[str, Any], correlation_id: Optional[str]
) -> Response:
    """Handle unexpected or untracked exceptions."""
    logger.error(
        "Unexpected error: %s", exc, extra={"correlation_id": correlation_id}, exc_info=True
    )
    response = exception_handler(exc, context)
    if not response:
        response = Response(
            {"error": {"code": "INTERNAL_ERROR", "message": "An internal error occurred"}},
            status=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )
    else:
        response.data = {
            "error": {"code": "INTERNAL_ERROR", "message": "An internal error occurred"}
        }
    return response
