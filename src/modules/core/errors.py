"""API error translation.

Plugs into drf-standardized-errors so every error response has the shape
``{"type": ..., "errors": [{"code", "detail", "attr"}]}``.  Domain errors and
pydantic validation errors raised by DTO construction are converted into DRF
exceptions here, so views can call services without wrapping every call.
"""

from __future__ import annotations

from typing import Dict, List

import structlog
from drf_standardized_errors.handler import ExceptionHandler
from pydantic import ValidationError as PydanticValidationError
from rest_framework import exceptions, status

from modules.core.exceptions import DomainError, ErrorKind

logger = structlog.get_logger(__name__)


class IllegalTransitionConflict(exceptions.APIException):
    status_code = status.HTTP_409_CONFLICT
    default_detail = "The requested state change is not allowed."
    default_code = "illegal_transition"


class ServiceUnavailable(exceptions.APIException):
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    default_detail = "Service temporarily unavailable, try again later."
    default_code = "unavailable"


def pydantic_field_errors(exc: PydanticValidationError) -> Dict[str, List[str]]:
    """Flatten pydantic errors into ``{"dotted.path": [messages]}``."""
    errors: Dict[str, List[str]] = {}
    for error in exc.errors():
        attr = ".".join(str(part) for part in error["loc"]) or "non_field_errors"
        message = str(error["msg"]).removeprefix("Value error, ")
        errors.setdefault(attr, []).append(message)
    return errors


def domain_to_api_exception(exc: DomainError) -> exceptions.APIException:
    if exc.kind is ErrorKind.VALIDATION:
        if exc.field_errors:
            return exceptions.ValidationError(exc.field_errors)
        return exceptions.ValidationError({"non_field_errors": [exc.message]})
    if exc.kind is ErrorKind.PERMISSION_DENIED:
        return exceptions.PermissionDenied(exc.message)
    if exc.kind is ErrorKind.NOT_FOUND:
        return exceptions.NotFound(exc.message)
    if exc.kind is ErrorKind.ILLEGAL_TRANSITION:
        return IllegalTransitionConflict(exc.message)
    # UNAVAILABLE / CONFIGURATION_MISSING: do not leak internals to clients
    return ServiceUnavailable()


class DomainExceptionHandler(ExceptionHandler):
    """drf-standardized-errors handler aware of the domain error taxonomy."""

    def convert_known_exceptions(self, exc: Exception) -> Exception:
        if isinstance(exc, DomainError):
            logger.info(
                "api.domain_error",
                kind=exc.kind.value,
                error=exc.message,
                view=self.context["view"].__class__.__name__,
            )
            return domain_to_api_exception(exc)
        if isinstance(exc, PydanticValidationError):
            return exceptions.ValidationError(pydantic_field_errors(exc))
        return super().convert_known_exceptions(exc)
