"""Error taxonomy shared by every bounded context.

Each domain exception carries an ``ErrorKind`` so the API layer can map it
to an HTTP status without knowing the concrete class.  Storage-level
failures are translated into these kinds exactly once, at the repository
boundary, through ``persistence_boundary``.
"""

from __future__ import annotations

import enum
from contextlib import contextmanager
from typing import Dict, Iterator, List, Optional

import structlog
from django.core.exceptions import ObjectDoesNotExist
from django.db import (
    IntegrityError,
    InterfaceError,
    OperationalError,
    ProgrammingError,
)

logger = structlog.get_logger(__name__)


class ErrorKind(str, enum.Enum):
    VALIDATION = "validation"
    PERMISSION_DENIED = "permission_denied"
    NOT_FOUND = "not_found"
    ILLEGAL_TRANSITION = "illegal_transition"
    UNAVAILABLE = "unavailable"
    CONFIGURATION_MISSING = "configuration_missing"


class DomainError(Exception):
    """Base class for every error raised on purpose by the service layer.

    ``field_errors`` maps a field name to its messages and is only
    meaningful for validation failures.
    """

    kind: ErrorKind = ErrorKind.VALIDATION
    default_message = "The request could not be processed."

    def __init__(
        self,
        message: Optional[str] = None,
        field_errors: Optional[Dict[str, List[str]]] = None,
    ) -> None:
        self.message = message or self.default_message
        self.field_errors = field_errors or {}
        super().__init__(self.message)


class ValidationFailed(DomainError):
    kind = ErrorKind.VALIDATION
    default_message = "Invalid input."


class PermissionDenied(DomainError):
    kind = ErrorKind.PERMISSION_DENIED
    default_message = "You do not have permission to perform this action."


class NotFound(DomainError):
    kind = ErrorKind.NOT_FOUND
    default_message = "Resource not found."


class IllegalTransition(DomainError):
    kind = ErrorKind.ILLEGAL_TRANSITION
    default_message = "The requested state change is not allowed."


class Unavailable(DomainError):
    kind = ErrorKind.UNAVAILABLE
    default_message = "The data store is unavailable, try again later."


class ConfigurationMissing(DomainError):
    """Required configuration values are absent.

    ``missing`` lists the names of the settings that were not provided.
    """

    kind = ErrorKind.CONFIGURATION_MISSING
    default_message = "Required configuration is missing."

    def __init__(self, missing: List[str], message: Optional[str] = None) -> None:
        self.missing = list(missing)
        super().__init__(
            message or f"Missing configuration: {', '.join(self.missing)}."
        )


@contextmanager
def persistence_boundary(
    resource: str,
    unavailable: type[Unavailable] = Unavailable,
) -> Iterator[None]:
    """Translate Django storage errors into domain error kinds.

    Usable as a context manager or as a decorator on repository methods.
    ``unavailable`` lets a bounded context raise its own ``Unavailable``
    subclass (e.g. ``CatalogUnavailable``).
    """
    try:
        yield
    except ObjectDoesNotExist as exc:
        raise NotFound(f"{resource} not found.") from exc
    except IntegrityError as exc:
        logger.warning("persistence.integrity_error", resource=resource, error=str(exc))
        raise ValidationFailed(f"{resource} violates a uniqueness or integrity rule.") from exc
    except (OperationalError, InterfaceError, ProgrammingError) as exc:
        logger.error("persistence.unavailable", resource=resource, error=str(exc))
        raise unavailable() from exc
