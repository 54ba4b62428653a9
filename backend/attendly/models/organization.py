"""Organization model - Churches and fellowships using the system."""

from typing import Optional
from uuid import UUID

from sqlalchemy import String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from attendly.models.base import Base, TimestampMixin, UUIDPrimaryKeyMixin


# Settings derived from country at creation time
KENYA = "Kenya"
COUNTRY_TIMEZONES = {
    "Kenya": "Africa/Nairobi",
    "Uganda": "Africa/Kampala",
    "Tanzania": "Africa/Dar_es_Salaam",
    "United States": "America/New_York",
    "United Kingdom": "Europe/London",
}
DEFAULT_TIMEZONE = "UTC"


def currency_for_country(country: str) -> str:
    """KES for Kenya, USD everywhere else."""
    return "KES" if country == KENYA else "USD"


def timezone_for_country(country: str) -> str:
    """IANA timezone for the known countries, UTC otherwise."""
    return COUNTRY_TIMEZONES.get(country, DEFAULT_TIMEZONE)


class Organization(Base, UUIDPrimaryKeyMixin, TimestampMixin):
    """
    Organization (tenant) model.

    Each organization is an isolated account. Attendance data references
    organization_id for isolation.

    Note: Organization table itself doesn't have organization_id (it IS the tenant).
    """

    __tablename__ = "organizations"

    name: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="Organization name",
    )

    type: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
        comment="Category label (church, fellowship, ministry, ...)",
    )

    country: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
    )

    phone: Mapped[str] = mapped_column(
        String(50),
        nullable=False,
        default="",
    )

    owner_id: Mapped[UUID] = mapped_column(
        Uuid,
        nullable=False,
        index=True,
        comment="User who created the organization",
    )

    # Locale settings, derived once from country at creation
    currency: Mapped[str] = mapped_column(
        String(3),
        nullable=False,
        default="USD",
    )

    timezone: Mapped[str] = mapped_column(
        String(64),
        nullable=False,
        default=DEFAULT_TIMEZONE,
    )

    # Sign-up survey answers
    estimated_attendance: Mapped[Optional[str]] = mapped_column(
        String(50),
        nullable=True,
    )

    how_did_you_hear: Mapped[Optional[str]] = mapped_column(
        String(255),
        nullable=True,
    )

    def __repr__(self) -> str:
        """String representation."""
        return f"<Organization {self.id} ({self.name})>"
