"""Aggregation engine - monthly stats and year-over-year comparison."""

import math
from uuid import UUID

from attendly.schemas.statistics import MonthlyStats, MonthlyTotal, YearComparison
from attendly.services.attendance import AttendanceRepository

MONTH_NAMES = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")


def round_half_up(value: float) -> int:
    """
    Round to the nearest integer, halves towards positive infinity.

    Same results as the dashboards' rounding: 2.5 -> 3, -12.5 -> -12.
    Python's round() would give 2 and -12 (banker's rounding).
    """
    return math.floor(value + 0.5)


def growth_percent(current_total: int, previous_total: int) -> int:
    """
    Percentage change from previous to current.

    When previous is 0, any positive current counts as +100% and zero
    stays 0; dashboards rely on this instead of an infinite value.
    """
    if previous_total > 0:
        return round_half_up((current_total - previous_total) / previous_total * 100)
    if current_total > 0:
        return 100
    return 0


class StatisticsService:
    """Pure computation over repository query results; writes nothing."""

    def __init__(self, repository: AttendanceRepository) -> None:
        self.repository = repository

    async def compute_monthly_stats(self, organization_id: UUID, month: int, year: int) -> MonthlyStats:
        """Totals and average head count for one month."""
        services = await self.repository.query_by_month(organization_id, month, year)

        total_services = len(services)
        total_attendance = sum(service.total_attendance for service in services)
        total_visitors = sum(service.visitor_count or 0 for service in services)
        avg_attendance = round_half_up(total_attendance / total_services) if total_services else 0

        return MonthlyStats(
            total_services=total_services,
            total_attendance=total_attendance,
            total_visitors=total_visitors,
            avg_attendance=avg_attendance,
        )

    async def compute_monthly_totals_by_year(self, organization_id: UUID, year: int) -> list[MonthlyTotal]:
        """Twelve buckets, Jan..Dec, zero for months without services."""
        totals = [MonthlyTotal(month=index + 1, month_name=name) for index, name in enumerate(MONTH_NAMES)]

        for service in await self.repository.query_by_year(organization_id, year):
            bucket = totals[service.service_day.month - 1]
            bucket.total_attendance += service.total_attendance
            bucket.service_count += 1

        return totals

    async def compare_years(
        self, organization_id: UUID, current_year: int, previous_year: int
    ) -> list[YearComparison]:
        """Month-by-month totals of two years with growth, Jan..Dec."""
        # Sequential: both queries share one session
        current = await self.compute_monthly_totals_by_year(organization_id, current_year)
        previous = await self.compute_monthly_totals_by_year(organization_id, previous_year)

        return [
            YearComparison(
                month=this_year.month_name,
                current_year=current_year,
                current_year_total=this_year.total_attendance,
                previous_year=previous_year,
                previous_year_total=last_year.total_attendance,
                growth=growth_percent(this_year.total_attendance, last_year.total_attendance),
            )
            for this_year, last_year in zip(current, previous)
        ]
