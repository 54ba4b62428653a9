"""Pydantic schemas for Attendance API."""

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field

from attendly.core.config import settings
from attendly.core.exceptions import ErrorKind


class VisitorInput(BaseModel):
    """A visitor as entered in the form or produced by the bulk import."""

    name: str = Field("", description="Visitor name (truncated to 100 chars on save)")
    contact: str = Field("", description="Contact details (truncated to 500 chars on save)")


class AttendanceCreate(BaseModel):
    """Schema for recording attendance of one service."""

    service_date: datetime = Field(
        ..., description="Service date; its calendar day in the organization's timezone must be unique"
    )
    total_attendance: int = Field(..., ge=1, le=settings.MAX_TOTAL_ATTENDANCE, description="Head count")
    service_type: Optional[str] = Field(None, max_length=100, description="Defaults to the configured service type")
    visitors: list[VisitorInput] = Field(default_factory=list, max_length=settings.MAX_VISITORS_PER_RECORD)


class AttendanceCreateResult(BaseModel):
    """Outcome of a create call: the record id, or why nothing was written."""

    success: bool
    record_id: Optional[UUID] = None
    error_kind: Optional[ErrorKind] = None
    message: Optional[str] = None


class ServiceResponse(BaseModel):
    """Attendance record as returned by list queries."""

    id: UUID
    organization_id: UUID
    service_date: datetime
    service_type: str
    total_attendance: int
    visitor_count: Optional[int] = Field(None, description="Only set by month/recent queries")
    created_at: datetime
    updated_at: datetime

    class Config:
        """Pydantic config."""

        from_attributes = True


class VisitorResponse(BaseModel):
    """Visitor sub-record."""

    id: UUID
    visitor_name: Optional[str]
    visitor_contact: Optional[str]
    visit_date: datetime
    created_at: datetime

    class Config:
        """Pydantic config."""

        from_attributes = True


class VisitorImportRequest(BaseModel):
    """Pasted spreadsheet rows (tab- or comma-separated, any number of columns)."""

    text: str = Field(..., description="One visitor per line; first column is the name")


class VisitorImportResponse(BaseModel):
    """Parsed visitors ready to attach to an attendance record."""

    visitors: list[VisitorInput]
    truncated: bool = Field(..., description="True when rows beyond the import limit were dropped")
