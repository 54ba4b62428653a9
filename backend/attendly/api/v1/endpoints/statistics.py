"""Attendance statistics API endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, Path, Query
from sqlalchemy.ext.asyncio import AsyncSession

from attendly.api.dependencies import get_member_organization
from attendly.core.database import get_db
from attendly.models.organization import Organization
from attendly.schemas.statistics import MonthlyStats, MonthlyTotal, YearComparison
from attendly.services.attendance import AttendanceRepository
from attendly.services.statistics import StatisticsService

router = APIRouter()


def _statistics(db: AsyncSession) -> StatisticsService:
    return StatisticsService(AttendanceRepository(db))


@router.get(
    "/organizations/{org_id}/stats/monthly",
    response_model=MonthlyStats,
    summary="Monthly statistics",
)
async def monthly_stats(
    organization: Annotated[Organization, Depends(get_member_organization)],
    db: Annotated[AsyncSession, Depends(get_db)],
    month: int = Query(..., ge=1, le=12),
    year: int = Query(..., ge=1, le=9999),
) -> MonthlyStats:
    return await _statistics(db).compute_monthly_stats(organization.id, month, year)


@router.get(
    "/organizations/{org_id}/stats/yearly/{year}",
    response_model=list[MonthlyTotal],
    summary="Monthly totals of a year",
    description="Always twelve entries, January to December.",
)
async def yearly_totals(
    organization: Annotated[Organization, Depends(get_member_organization)],
    db: Annotated[AsyncSession, Depends(get_db)],
    year: int = Path(..., ge=1, le=9999),
) -> list[MonthlyTotal]:
    return await _statistics(db).compute_monthly_totals_by_year(organization.id, year)


@router.get(
    "/organizations/{org_id}/stats/compare",
    response_model=list[YearComparison],
    summary="Year-over-year comparison",
)
async def compare_years(
    organization: Annotated[Organization, Depends(get_member_organization)],
    db: Annotated[AsyncSession, Depends(get_db)],
    current_year: int = Query(..., ge=1, le=9999),
    previous_year: int = Query(..., ge=1, le=9999),
) -> list[YearComparison]:
    return await _statistics(db).compare_years(organization.id, current_year, previous_year)
