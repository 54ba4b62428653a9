"""Tests for translating store failures into domain errors."""

import asyncio

import pytest
from sqlalchemy.exc import IntegrityError, InterfaceError, OperationalError, ProgrammingError

from attendly.core.exceptions import (
    DuplicateRecordError,
    ErrorKind,
    IndexMissingError,
    StoreUnavailableError,
    classify_store_error,
    translate_store_errors,
)


class UndefinedTableError(Exception):
    """Stand-in for the asyncpg exception class of the same name."""


@pytest.mark.parametrize(
    "exc",
    [
        OperationalError("SELECT 1", {}, Exception("no such table: services")),
        ProgrammingError("SELECT 1", {}, UndefinedTableError('relation "services" does not exist')),
    ],
)
def test_missing_schema_is_index_missing(exc):
    error = classify_store_error(exc, "query_by_month")

    assert isinstance(error, IndexMissingError)
    assert error.error_kind == ErrorKind.INDEX_MISSING
    assert "query_by_month" in error.message


@pytest.mark.parametrize(
    "exc",
    [
        OperationalError("SELECT 1", {}, ConnectionRefusedError("connection refused")),
        InterfaceError("SELECT 1", {}, Exception("connection is closed")),
        ConnectionResetError("reset by peer"),
        asyncio.TimeoutError(),
    ],
)
def test_transport_failures_are_store_unavailable(exc):
    error = classify_store_error(exc, "query_recent")

    assert isinstance(error, StoreUnavailableError)
    assert error.status_code == 503


def test_unclassified_errors_pass_through():
    exc = IntegrityError("INSERT", {}, Exception("CHECK constraint failed"))

    assert classify_store_error(exc, "create_attendance_record") is exc


def test_domain_errors_pass_through():
    exc = DuplicateRecordError("already recorded")

    assert classify_store_error(exc, "create_attendance_record") is exc


def test_translate_store_errors_raises_domain_error():
    with pytest.raises(StoreUnavailableError) as exc_info:
        with translate_store_errors("get_visitors"):
            raise ConnectionResetError("reset by peer")

    assert isinstance(exc_info.value.__cause__, ConnectionResetError)


def test_translate_store_errors_leaves_other_errors():
    with pytest.raises(KeyError):
        with translate_store_errors("get_visitors"):
            raise KeyError("unrelated")
