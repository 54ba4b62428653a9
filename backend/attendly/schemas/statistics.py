"""Pydantic schemas for derived attendance statistics."""

from pydantic import BaseModel, Field


class MonthlyStats(BaseModel):
    """Totals for one organization and month."""

    total_services: int = Field(..., description="Number of services recorded")
    total_attendance: int = Field(..., description="Sum of head counts")
    total_visitors: int = Field(..., description="Sum of visitor sub-records")
    avg_attendance: int = Field(..., description="Rounded mean head count, 0 without services")


class MonthlyTotal(BaseModel):
    """One calendar month bucket of a year."""

    month: int = Field(..., ge=1, le=12)
    month_name: str
    total_attendance: int = 0
    service_count: int = 0


class YearComparison(BaseModel):
    """Same month of two years side by side."""

    month: str = Field(..., description="Month label (Jan..Dec)")
    current_year: int
    current_year_total: int
    previous_year: int
    previous_year_total: int
    growth: int = Field(..., description="Rounded percentage change; 100 when previous is 0 and current > 0")
