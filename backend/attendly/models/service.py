"""Service model - One dated attendance record of an organization."""

from datetime import date, datetime

from sqlalchemy import CheckConstraint, Date, DateTime, Index, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from attendly.models.base import Base, TenantMixin, TimestampMixin, UUIDPrimaryKeyMixin


class Service(Base, UUIDPrimaryKeyMixin, TenantMixin, TimestampMixin):
    """
    Attendance record for one service.

    service_date keeps the full timestamp the caller supplied; service_day is
    its calendar date and is the uniqueness key, so the database itself
    rejects a second record for the same organization and day.
    """

    __tablename__ = "services"
    __table_args__ = (
        # One attendance record per organization per calendar day
        UniqueConstraint("organization_id", "service_day", name="uq_services_organization_day"),
        # Month/year windows and recent feed: filter by tenant, order by date
        Index("idx_services_organization_date", "organization_id", "service_date"),
        CheckConstraint(
            "total_attendance >= 1 AND total_attendance <= 1000000",
            name="ck_services_total_attendance_range",
        ),
    )

    service_date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        comment="When the service took place (full precision)",
    )

    service_day: Mapped[date] = mapped_column(
        Date,
        nullable=False,
        comment="Calendar day of service_date (uniqueness key)",
    )

    service_type: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
    )

    total_attendance: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        comment="Headline head count (1..1,000,000)",
    )

    # Filled in by list queries that count visitors; not persisted
    visitor_count = None

    def __repr__(self) -> str:
        """String representation."""
        return f"<Service id={self.id} org={self.organization_id} day={self.service_day}>"
