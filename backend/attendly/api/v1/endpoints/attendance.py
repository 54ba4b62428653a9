"""Attendance records API endpoints."""

from typing import Annotated, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from attendly.api.dependencies import get_member_organization
from attendly.core.database import get_db
from attendly.core.exceptions import (
    DuplicateRecordError,
    IndexMissingError,
    NotFoundError,
    StoreUnavailableError,
    ValidationError,
)
from attendly.models.organization import Organization
from attendly.schemas.attendance import AttendanceCreate, AttendanceCreateResult, ServiceResponse, VisitorResponse
from attendly.services.attendance import AttendanceRepository, AttendanceService

router = APIRouter()

# Status codes for failed create results
CREATE_FAILURE_STATUS = {
    error_cls.error_kind: error_cls.status_code
    for error_cls in (DuplicateRecordError, ValidationError, IndexMissingError, StoreUnavailableError, NotFoundError)
}


@router.post(
    "/organizations/{org_id}/attendance",
    response_model=AttendanceCreateResult,
    status_code=status.HTTP_201_CREATED,
    summary="Record attendance",
    description="Record one service with its visitors. Only one record per calendar day is accepted.",
    responses={
        409: {"model": AttendanceCreateResult, "description": "Attendance already recorded for this date"},
        503: {"model": AttendanceCreateResult, "description": "Schema missing or database unavailable"},
    },
)
async def create_attendance(
    payload: AttendanceCreate,
    organization: Annotated[Organization, Depends(get_member_organization)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> AttendanceCreateResult | JSONResponse:
    """
    Create an attendance record.

    Returns:
        201 with the record id, or the mapped error status with
        ``success=false`` and the error kind. A failure means nothing was
        written.
    """
    service = AttendanceService(AttendanceRepository(db))
    result = await service.create_attendance_record(organization.id, payload)
    if not result.success:
        return JSONResponse(
            status_code=CREATE_FAILURE_STATUS.get(result.error_kind, status.HTTP_500_INTERNAL_SERVER_ERROR),
            content=result.model_dump(mode="json"),
        )
    return result


@router.get(
    "/organizations/{org_id}/attendance",
    response_model=list[ServiceResponse],
    summary="List services of a month",
    description="Services of the month, newest first, with visitor counts.",
)
async def list_attendance_by_month(
    organization: Annotated[Organization, Depends(get_member_organization)],
    db: Annotated[AsyncSession, Depends(get_db)],
    month: int = Query(..., ge=1, le=12),
    year: int = Query(..., ge=1, le=9999),
) -> list[ServiceResponse]:
    services = await AttendanceRepository(db).query_by_month(organization.id, month, year)
    return [ServiceResponse.model_validate(service) for service in services]


@router.get(
    "/organizations/{org_id}/attendance/recent",
    response_model=list[ServiceResponse],
    summary="Recent services",
)
async def list_recent_attendance(
    organization: Annotated[Organization, Depends(get_member_organization)],
    db: Annotated[AsyncSession, Depends(get_db)],
    count: Optional[int] = Query(None, ge=1, le=100),
) -> list[ServiceResponse]:
    services = await AttendanceRepository(db).query_recent(organization.id, count)
    return [ServiceResponse.model_validate(service) for service in services]


@router.get(
    "/organizations/{org_id}/attendance/{record_id}/visitors",
    response_model=list[VisitorResponse],
    summary="Visitors of a service",
)
async def list_visitors(
    record_id: UUID,
    organization: Annotated[Organization, Depends(get_member_organization)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> list[VisitorResponse]:
    visitors = await AttendanceRepository(db).get_visitors(organization.id, record_id)
    return [VisitorResponse.model_validate(visitor) for visitor in visitors]
