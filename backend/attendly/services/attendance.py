"""Attendance repository - tenant-scoped storage of services and visitors."""

import calendar
import logging
from datetime import date, datetime
from typing import Iterable, Iterator, Optional, Sequence
from uuid import UUID, uuid4
from zoneinfo import ZoneInfo

from sqlalchemy import func, insert, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from attendly.core.config import settings
from attendly.core.exceptions import (
    AttendlyError,
    DuplicateRecordError,
    NotFoundError,
    ValidationError,
    translate_store_errors,
)
from attendly.models.base import utcnow
from attendly.models.organization import Organization
from attendly.models.service import Service
from attendly.models.visitor import VISITOR_CONTACT_MAX_LENGTH, VISITOR_NAME_MAX_LENGTH, Visitor
from attendly.schemas.attendance import AttendanceCreate, AttendanceCreateResult, VisitorInput

logger = logging.getLogger(__name__)

DAY_UNIQUE_CONSTRAINT = "uq_services_organization_day"


def month_bounds(year: int, month: int) -> tuple[date, date]:
    """First and last calendar day of a month."""
    if not 1 <= month <= 12:
        raise ValidationError(f"month must be between 1 and 12, got {month}")
    validate_year(year)
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, 1), date(year, month, last_day)


def validate_year(year: int) -> None:
    """Reject years the calendar cannot represent."""
    if not 1 <= year <= 9999:
        raise ValidationError(f"year must be between 1 and 9999, got {year}")


def local_day(service_date: datetime, timezone: str) -> date:
    """
    Calendar day of service_date in the organization's timezone.

    Clients send UTC timestamps, so an aware value is converted before
    taking its date; a naive value is already organization-local.
    """
    if service_date.tzinfo is None:
        return service_date.date()
    return service_date.astimezone(ZoneInfo(timezone)).date()


def _clip(value: str, limit: int) -> Optional[str]:
    if not value.strip():
        return None
    return value[:limit]


def normalize_visitors(visitors: Iterable[VisitorInput]) -> list[tuple[Optional[str], Optional[str]]]:
    """
    Drop blank visitors and clip the survivors to the column sizes.

    A visitor is blank when both name and contact are empty or whitespace.
    Kept values are stored as entered, cut to their first 100 (name) or
    500 (contact) characters; imported contacts may be several spreadsheet
    columns joined together, so the cut is lossy.

    Returns:
        (name, contact) pairs, with blank values stored as None
    """
    rows = []
    for visitor in visitors:
        name = _clip(visitor.name, VISITOR_NAME_MAX_LENGTH)
        contact = _clip(visitor.contact, VISITOR_CONTACT_MAX_LENGTH)
        if name is None and contact is None:
            continue
        rows.append((name, contact))
    return rows


def _chunks(rows: Sequence, size: int) -> Iterator[Sequence]:
    for start in range(0, len(rows), size):
        yield rows[start:start + size]


def _is_day_conflict(exc: IntegrityError) -> bool:
    message = str(exc)
    return DAY_UNIQUE_CONSTRAINT in message or (
        "services.organization_id" in message and "services.service_day" in message
    )


class AttendanceRepository:
    """
    Reads and writes attendance records of one organization at a time.

    Every method takes the organization_id explicitly and applies it as a
    filter; the repository never infers the tenant from anything else.
    """

    def __init__(
        self,
        session: AsyncSession,
        batch_size: Optional[int] = None,
        max_visitors: Optional[int] = None,
    ) -> None:
        self.session = session
        self.batch_size = batch_size or settings.VISITOR_BATCH_SIZE
        self.max_visitors = max_visitors or settings.MAX_VISITORS_PER_RECORD

    async def create_attendance_record(
        self,
        organization_id: UUID,
        service_date: datetime,
        total_attendance: int,
        visitors: Sequence[VisitorInput] = (),
        service_type: Optional[str] = None,
    ) -> Service:
        """
        Record attendance for one service, with its visitors.

        At most one record may exist per organization and calendar day.
        A pre-check rejects the common case cheaply; the unique constraint
        on (organization_id, service_day) rejects the concurrent case. The
        record and all visitor batches are committed in one transaction.

        Args:
            organization_id: Owning organization (access already checked by caller)
            service_date: Any timestamp; only its calendar day in the organization's
                timezone must be unique. Naive values are taken as local time.
            total_attendance: Head count, 1..1,000,000
            visitors: Visitors to attach; blank entries are dropped
            service_type: Defaults to settings.DEFAULT_SERVICE_TYPE

        Returns:
            The new Service, with visitor_count set

        Raises:
            ValidationError: total_attendance out of range, too many visitors or a
                service day after today
            NotFoundError: Unknown organization
            DuplicateRecordError: A record already exists for that day
            IndexMissingError: Schema not provisioned
            StoreUnavailableError: Database unreachable; nothing was written
        """
        if isinstance(total_attendance, bool) or not isinstance(total_attendance, int):
            raise ValidationError("total_attendance must be an integer")
        if not 1 <= total_attendance <= settings.MAX_TOTAL_ATTENDANCE:
            raise ValidationError(
                f"total_attendance must be between 1 and {settings.MAX_TOTAL_ATTENDANCE}"
            )
        if len(visitors) > self.max_visitors:
            raise ValidationError(f"At most {self.max_visitors} visitors per service")

        rows = normalize_visitors(visitors)

        with translate_store_errors("create_attendance_record"):
            timezone = await self._organization_timezone(organization_id)
            service_day = local_day(service_date, timezone)
            if service_day > datetime.now(ZoneInfo(timezone)).date():
                raise ValidationError("Service date cannot be in the future")
            existing = await self._find_record_on_day(organization_id, service_day)
        if existing is not None:
            logger.info(
                "Duplicate attendance rejected",
                extra={"organization_id": str(organization_id), "service_day": service_day.isoformat()},
            )
            raise DuplicateRecordError(f"Attendance already recorded for {service_day.isoformat()}")

        service = Service(
            id=uuid4(),
            organization_id=organization_id,
            service_date=service_date,
            service_day=service_day,
            service_type=service_type or settings.DEFAULT_SERVICE_TYPE,
            total_attendance=total_attendance,
        )

        try:
            with translate_store_errors("create_attendance_record"):
                self.session.add(service)
                try:
                    await self.session.flush()
                except IntegrityError as exc:
                    if not _is_day_conflict(exc):
                        raise
                    raise DuplicateRecordError(
                        f"Attendance already recorded for {service_day.isoformat()}"
                    ) from exc

                created_at = utcnow()
                for chunk in _chunks(rows, self.batch_size):
                    await self.session.execute(
                        insert(Visitor),
                        [
                            {
                                "id": uuid4(),
                                "organization_id": organization_id,
                                "service_id": service.id,
                                "visitor_name": name,
                                "visitor_contact": contact,
                                "visit_date": service_date,
                                "created_at": created_at,
                            }
                            for name, contact in chunk
                        ],
                    )

                await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

        service.visitor_count = len(rows)
        logger.info(
            "Attendance record created",
            extra={
                "organization_id": str(organization_id),
                "service_id": str(service.id),
                "visitor_count": len(rows),
                "dropped_visitors": len(visitors) - len(rows),
            },
        )
        return service

    async def query_by_month(self, organization_id: UUID, month: int, year: int) -> list[Service]:
        """
        Services of one month, newest first, each with visitor_count set.

        Returns an empty list when nothing matches.
        """
        first_day, last_day = month_bounds(year, month)
        with translate_store_errors("query_by_month"):
            result = await self.session.execute(
                select(Service)
                .where(
                    Service.organization_id == organization_id,
                    Service.service_day >= first_day,
                    Service.service_day <= last_day,
                )
                .order_by(Service.service_date.desc())
            )
            services = list(result.scalars().all())
            await self._attach_visitor_counts(organization_id, services)
        return services

    async def query_by_year(self, organization_id: UUID, year: int) -> list[Service]:
        """Services of one year, oldest first, without visitor counts."""
        validate_year(year)
        with translate_store_errors("query_by_year"):
            result = await self.session.execute(
                select(Service)
                .where(
                    Service.organization_id == organization_id,
                    Service.service_day >= date(year, 1, 1),
                    Service.service_day <= date(year, 12, 31),
                )
                .order_by(Service.service_date.asc())
            )
            return list(result.scalars().all())

    async def query_recent(self, organization_id: UUID, count: Optional[int] = None) -> list[Service]:
        """Latest services (default settings.RECENT_SERVICES_DEFAULT), with visitor counts."""
        if count is None:
            count = settings.RECENT_SERVICES_DEFAULT
        if count < 1:
            raise ValidationError("count must be positive")
        with translate_store_errors("query_recent"):
            result = await self.session.execute(
                select(Service)
                .where(Service.organization_id == organization_id)
                .order_by(Service.service_date.desc())
                .limit(count)
            )
            services = list(result.scalars().all())
            await self._attach_visitor_counts(organization_id, services)
        return services

    async def get_visitors(self, organization_id: UUID, record_id: UUID) -> list[Visitor]:
        """
        Visitors of one service.

        The service must belong to organization_id; a record id from another
        organization is reported as not found, exactly like an unknown id.

        Raises:
            NotFoundError: No such service in this organization
        """
        with translate_store_errors("get_visitors"):
            owner = await self.session.execute(
                select(Service.id).where(
                    Service.id == record_id,
                    Service.organization_id == organization_id,
                )
            )
            if owner.scalar_one_or_none() is None:
                raise NotFoundError(f"Service {record_id} not found")

            result = await self.session.execute(
                select(Visitor)
                .where(
                    Visitor.service_id == record_id,
                    Visitor.organization_id == organization_id,
                )
                .order_by(Visitor.created_at, Visitor.visitor_name)
            )
            return list(result.scalars().all())

    async def _organization_timezone(self, organization_id: UUID) -> str:
        result = await self.session.execute(
            select(Organization.timezone).where(Organization.id == organization_id)
        )
        timezone = result.scalar_one_or_none()
        if timezone is None:
            raise NotFoundError(f"Organization {organization_id} not found")
        return timezone

    async def _find_record_on_day(self, organization_id: UUID, service_day: date) -> Optional[Service]:
        result = await self.session.execute(
            select(Service)
            .where(
                Service.organization_id == organization_id,
                Service.service_day == service_day,
            )
            .limit(1)
        )
        return result.scalar_one_or_none()

    async def _attach_visitor_counts(self, organization_id: UUID, services: list[Service]) -> None:
        if not services:
            return
        result = await self.session.execute(
            select(Visitor.service_id, func.count(Visitor.id))
            .where(
                Visitor.organization_id == organization_id,
                Visitor.service_id.in_([service.id for service in services]),
            )
            .group_by(Visitor.service_id)
        )
        counts = dict(result.all())
        for service in services:
            service.visitor_count = counts.get(service.id, 0)


class AttendanceService:
    """Result-style facade over the repository for the create operation."""

    def __init__(self, repository: AttendanceRepository) -> None:
        self.repository = repository

    async def create_attendance_record(
        self, organization_id: UUID, payload: AttendanceCreate
    ) -> AttendanceCreateResult:
        """
        Create a record and report the outcome instead of raising.

        A failed result always means nothing was written.
        """
        try:
            service = await self.repository.create_attendance_record(
                organization_id,
                payload.service_date,
                payload.total_attendance,
                payload.visitors,
                service_type=payload.service_type,
            )
        except AttendlyError as exc:
            return AttendanceCreateResult(
                success=False,
                error_kind=exc.error_kind,
                message=exc.message,
            )
        return AttendanceCreateResult(success=True, record_id=service.id)
