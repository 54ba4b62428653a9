"""Domain errors and translation of store failures into them."""

import asyncio
import logging
from contextlib import contextmanager
from enum import Enum
from typing import Iterator

from sqlalchemy.exc import DBAPIError, InterfaceError, OperationalError, ProgrammingError, SQLAlchemyError

logger = logging.getLogger(__name__)


class ErrorKind(str, Enum):
    """Failure classification exposed to API clients."""

    DUPLICATE_RECORD = "duplicate_record"
    VALIDATION = "validation"
    INDEX_MISSING = "index_missing"
    STORE_UNAVAILABLE = "store_unavailable"
    NOT_FOUND = "not_found"


class AttendlyError(Exception):
    """Base class for errors the attendance layer reports to callers."""

    error_kind: ErrorKind
    status_code: int = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class DuplicateRecordError(AttendlyError):
    """Attendance already recorded for this organization on this date."""

    error_kind = ErrorKind.DUPLICATE_RECORD
    status_code = 409


class ValidationError(AttendlyError):
    """Caller-supplied value outside its domain range."""

    error_kind = ErrorKind.VALIDATION
    status_code = 422


class IndexMissingError(AttendlyError):
    """
    The store lacks a table, relation or index the query needs.

    This is an operator problem (run the migrations), not a transient
    failure, so callers must not retry it.
    """

    error_kind = ErrorKind.INDEX_MISSING
    status_code = 503


class StoreUnavailableError(AttendlyError):
    """Transient connection or transport failure. Safe to retry reads."""

    error_kind = ErrorKind.STORE_UNAVAILABLE
    status_code = 503


class NotFoundError(AttendlyError):
    """Referenced organization, user or record does not exist."""

    error_kind = ErrorKind.NOT_FOUND
    status_code = 404


# Substrings of driver messages meaning the schema is not provisioned
_MISSING_SCHEMA_MARKERS = (
    "no such table",
    "no such index",
    "undefinedtable",
    "undefinedobject",
    "does not exist",
)


def _describe(exc: BaseException) -> str:
    """Driver error class and message, without SQL text or bound parameters."""
    orig = getattr(exc, "orig", None)
    if orig is None:
        return f"{type(exc).__name__}: {exc}"
    return f"{type(orig).__name__}: {orig}"


def _is_missing_schema(exc: BaseException) -> bool:
    orig = getattr(exc, "orig", None)
    haystack = f"{type(orig).__name__ if orig is not None else ''} {exc}".lower()
    return any(marker in haystack for marker in _MISSING_SCHEMA_MARKERS)


def classify_store_error(exc: BaseException, operation: str) -> BaseException:
    """
    Translate a store exception into a domain error.

    Args:
        exc: Exception raised by SQLAlchemy or the driver
        operation: Short name of the failing operation, used in messages

    Returns:
        The domain error to raise, or ``exc`` itself when it is not a
        store failure we know how to classify.
    """
    if isinstance(exc, AttendlyError):
        return exc

    if isinstance(exc, (ProgrammingError, OperationalError)) and _is_missing_schema(exc):
        logger.error(
            "Store schema missing",
            extra={"operation": operation, "error": _describe(exc)},
        )
        return IndexMissingError(
            f"{operation} requires a table or index that does not exist yet. "
            "Run 'alembic upgrade head' to provision the schema."
        )

    if isinstance(exc, (OperationalError, InterfaceError)) or (
        isinstance(exc, DBAPIError) and exc.connection_invalidated
    ):
        logger.warning(
            "Store unavailable",
            extra={"operation": operation, "error": _describe(exc)},
        )
        return StoreUnavailableError(f"{operation} failed: database unavailable")

    if isinstance(exc, (OSError, asyncio.TimeoutError)):
        logger.warning(
            "Store connection failed",
            extra={"operation": operation, "error": _describe(exc)},
        )
        return StoreUnavailableError(f"{operation} failed: {exc}")

    return exc


@contextmanager
def translate_store_errors(operation: str) -> Iterator[None]:
    """
    Re-raise store failures inside the block as domain errors.

    Usage:
        with translate_store_errors("query_by_month"):
            result = await session.execute(stmt)
    """
    try:
        yield
    except AttendlyError:
        raise
    except (SQLAlchemyError, OSError, asyncio.TimeoutError) as exc:
        error = classify_store_error(exc, operation)
        if error is exc:
            raise
        raise error from exc
