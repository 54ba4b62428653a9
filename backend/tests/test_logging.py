"""Tests for PII redaction in structured logs."""

import json
import logging
from datetime import datetime

import pytest
from sqlalchemy import text

from attendly.core.exceptions import IndexMissingError
from attendly.core.logging import SanitizingFormatter
from attendly.schemas.attendance import VisitorInput


def _format(**extra) -> dict:
    formatter = SanitizingFormatter(fmt="%(levelname)s %(name)s %(message)s")
    record = logging.LogRecord("attendly.test", logging.INFO, __file__, 1, "Visitor saved", None, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return json.loads(formatter.format(record))


def test_visitor_fields_redacted():
    output = _format(visitor_name="Jane Wanjiku", visitor_contact="0712345678", owner_email="a@b.org")

    assert output["visitor_name"] == "***REDACTED***"
    assert output["visitor_contact"] == "***REDACTED***"
    assert output["owner_email"] == "***REDACTED***"


def test_identifiers_kept():
    output = _format(organization_id="6f1c", visitor_count=3)

    assert output["organization_id"] == "6f1c"
    assert output["visitor_count"] == 3
    assert output["message"] == "Visitor saved"
    assert output["service"] == "Attendly"


def test_sql_parameters_scrubbed_from_strings():
    output = _format(
        error="(sqlite3.OperationalError) no such table: visitors\n"
        "[SQL: INSERT INTO visitors VALUES (?, ?)]\n"
        "[parameters: ('Jane Secret', '0712-999-888')]\n"
        "(Background on this error at: https://sqlalche.me/e/20/e3q8)"
    )

    assert "0712-999-888" not in output["error"]
    assert "Jane Secret" not in output["error"]
    assert "no such table: visitors" in output["error"]


@pytest.mark.asyncio
async def test_store_failure_logs_no_visitor_data(test_engine, repository, test_org_1, caplog):
    """A failed visitor insert is logged without the visitor's name or contact."""
    async with test_engine.begin() as conn:
        await conn.execute(text("DROP TABLE visitors"))

    with caplog.at_level(logging.WARNING):
        with pytest.raises(IndexMissingError):
            await repository.create_attendance_record(
                test_org_1.id,
                datetime(2024, 3, 2, 10, 30),
                10,
                [VisitorInput(name="Jane Secret", contact="0712-999-888")],
            )

    assert caplog.records
    for record in caplog.records:
        logged = f"{record.getMessage()} {getattr(record, 'error', '')}"
        assert "0712-999-888" not in logged
        assert "Jane Secret" not in logged
