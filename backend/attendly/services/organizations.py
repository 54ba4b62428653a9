"""Organization directory - tenants, users and memberships."""

import logging
from typing import Optional
from uuid import UUID, uuid4
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from attendly.core.exceptions import NotFoundError, ValidationError, translate_store_errors
from attendly.models.base import utcnow
from attendly.models.organization import Organization, currency_for_country, timezone_for_country
from attendly.models.user import OrganizationMember, User

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = ("name", "type", "country", "phone", "currency", "timezone")


class OrganizationDirectory:
    """Resolves which organizations a user can open, and manages them."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def create_user(self, email: str, full_name: str = "", user_id: Optional[UUID] = None) -> User:
        """
        Create the account row the sign-up flow attaches organizations to.

        Raises:
            ValidationError: Email or id already registered
        """
        user = User(id=user_id or uuid4(), email=email, full_name=full_name)
        with translate_store_errors("create_user"):
            self.session.add(user)
            try:
                await self.session.commit()
            except IntegrityError as exc:
                await self.session.rollback()
                raise ValidationError(f"User {email} is already registered") from exc
        logger.info("User created", extra={"user_id": str(user.id)})
        return user

    async def get_user(self, user_id: UUID) -> Optional[User]:
        with translate_store_errors("get_user"):
            return await self.session.get(User, user_id)

    async def create_organization(
        self,
        owner_id: UUID,
        name: str,
        type: str,
        country: str,
        phone: str = "",
        estimated_attendance: Optional[str] = None,
        how_did_you_hear: Optional[str] = None,
    ) -> Organization:
        """
        Create an organization owned by owner_id.

        Currency and timezone are derived from the country here and only
        here; the owner becomes the first member.

        Raises:
            NotFoundError: owner_id is not a known user
        """
        organization = Organization(
            id=uuid4(),
            name=name,
            type=type,
            country=country,
            phone=phone,
            owner_id=owner_id,
            currency=currency_for_country(country),
            timezone=timezone_for_country(country),
            estimated_attendance=estimated_attendance or None,
            how_did_you_hear=how_did_you_hear or None,
        )

        with translate_store_errors("create_organization"):
            if await self.session.get(User, owner_id) is None:
                raise NotFoundError(f"User {owner_id} not found")
            self.session.add(organization)
            await self.session.flush()
            self.session.add(OrganizationMember(user_id=owner_id, organization_id=organization.id))
            await self.session.commit()

        logger.info(
            "Organization created",
            extra={"organization_id": str(organization.id), "currency": organization.currency},
        )
        return organization

    async def get_organization(self, organization_id: UUID) -> Optional[Organization]:
        """Organization by id, or None."""
        with translate_store_errors("get_organization"):
            return await self.session.get(Organization, organization_id)

    async def get_user_organizations(self, user_id: UUID) -> list[Organization]:
        """
        Organizations the user is a member of, in joining order.

        Membership rows pointing at organizations that no longer exist are
        skipped. An empty list means the user has to create an organization
        first; it is not an error.
        """
        with translate_store_errors("get_user_organizations"):
            result = await self.session.execute(
                select(Organization)
                .join(OrganizationMember, OrganizationMember.organization_id == Organization.id)
                .where(OrganizationMember.user_id == user_id)
                .order_by(OrganizationMember.created_at, Organization.name)
            )
            return list(result.scalars().all())

    async def update_organization(self, organization_id: UUID, **changes: Optional[str]) -> Organization:
        """
        Apply an explicit settings update.

        Only keys in UPDATABLE_FIELDS with a non-None value are written.
        Changing country does not rewrite currency or timezone.

        Raises:
            ValidationError: timezone is not a known IANA zone
            NotFoundError: Organization does not exist
        """
        unknown = set(changes) - set(UPDATABLE_FIELDS)
        if unknown:
            raise TypeError(f"Cannot update organization fields: {', '.join(sorted(unknown))}")
        if changes.get("timezone") is not None:
            try:
                ZoneInfo(changes["timezone"])
            except (ZoneInfoNotFoundError, ValueError) as exc:
                raise ValidationError(f"Unknown timezone {changes['timezone']}") from exc

        with translate_store_errors("update_organization"):
            organization = await self.session.get(Organization, organization_id)
            if organization is None:
                raise NotFoundError(f"Organization {organization_id} not found")

            for field, value in changes.items():
                if value is not None:
                    setattr(organization, field, value)
            organization.updated_at = utcnow()
            await self.session.commit()

        logger.info("Organization updated", extra={"organization_id": str(organization_id)})
        return organization

    async def ensure_user_org_access(self, user_id: UUID, organization_id: UUID) -> None:
        """
        Add organization_id to the user's memberships (set union).

        Safe to call repeatedly. Also records the access as last_login_at.

        Raises:
            NotFoundError: Unknown user or organization
        """
        with translate_store_errors("ensure_user_org_access"):
            user = await self.session.get(User, user_id)
            if user is None:
                raise NotFoundError(f"User {user_id} not found")
            if await self.session.get(Organization, organization_id) is None:
                raise NotFoundError(f"Organization {organization_id} not found")

            user.last_login_at = utcnow()
            if not await self.is_member(user_id, organization_id):
                self.session.add(OrganizationMember(user_id=user_id, organization_id=organization_id))
            try:
                await self.session.commit()
            except IntegrityError:
                # Concurrent call added the same membership first
                await self.session.rollback()

    async def is_member(self, user_id: UUID, organization_id: UUID) -> bool:
        with translate_store_errors("is_member"):
            result = await self.session.execute(
                select(OrganizationMember.user_id).where(
                    OrganizationMember.user_id == user_id,
                    OrganizationMember.organization_id == organization_id,
                )
            )
            return result.first() is not None

    async def get_members(self, organization_id: UUID) -> list[UUID]:
        """User ids with access to the organization."""
        with translate_store_errors("get_members"):
            result = await self.session.execute(
                select(OrganizationMember.user_id)
                .where(OrganizationMember.organization_id == organization_id)
                .order_by(OrganizationMember.created_at)
            )
            return list(result.scalars().all())
