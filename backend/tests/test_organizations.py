"""Tests for the organization directory (tenants, users, memberships)."""

from uuid import uuid4

import pytest

from attendly.core.exceptions import NotFoundError, ValidationError
from attendly.models import OrganizationMember
from attendly.models.organization import currency_for_country, timezone_for_country


# ============================================================================
# Country-derived Settings
# ============================================================================

@pytest.mark.parametrize(
    "country, currency, timezone",
    [
        ("Kenya", "KES", "Africa/Nairobi"),
        ("Uganda", "USD", "Africa/Kampala"),
        ("United States", "USD", "America/New_York"),
        ("Atlantis", "USD", "UTC"),
    ],
)
def test_country_settings(country, currency, timezone):
    assert currency_for_country(country) == currency
    assert timezone_for_country(country) == timezone


@pytest.mark.asyncio
async def test_create_organization_derives_settings(test_org_1, test_org_2):
    assert (test_org_1.currency, test_org_1.timezone) == ("KES", "Africa/Nairobi")
    assert (test_org_2.currency, test_org_2.timezone) == ("USD", "America/New_York")


@pytest.mark.asyncio
async def test_create_organization_owner_is_member(directory, test_user_1, test_org_1):
    assert test_org_1.owner_id == test_user_1.id
    assert await directory.get_members(test_org_1.id) == [test_user_1.id]
    assert await directory.is_member(test_user_1.id, test_org_1.id)


@pytest.mark.asyncio
async def test_create_organization_unknown_owner(directory):
    with pytest.raises(NotFoundError):
        await directory.create_organization(owner_id=uuid4(), name="Ghost Church", type="Church", country="Kenya")


@pytest.mark.asyncio
async def test_create_user_duplicate_email(directory, test_user_1):
    with pytest.raises(ValidationError):
        await directory.create_user(test_user_1.email, "Someone Else")


# ============================================================================
# Updates
# ============================================================================

@pytest.mark.asyncio
async def test_update_country_keeps_currency_and_timezone(directory, test_org_1):
    """Changing the country is not a re-derivation of the locale settings."""
    updated = await directory.update_organization(test_org_1.id, country="United States")

    assert updated.country == "United States"
    assert updated.currency == "KES"
    assert updated.timezone == "Africa/Nairobi"


@pytest.mark.asyncio
async def test_update_explicit_currency(directory, test_org_1):
    updated = await directory.update_organization(test_org_1.id, currency="USD", name=None, phone="+254711111111")

    assert updated.currency == "USD"
    assert updated.name == "Grace Fellowship Nairobi"
    assert updated.phone == "+254711111111"


@pytest.mark.asyncio
async def test_update_unknown_field_rejected(directory, test_org_1):
    with pytest.raises(TypeError):
        await directory.update_organization(test_org_1.id, owner_id=uuid4())


@pytest.mark.asyncio
async def test_update_unknown_organization(directory):
    with pytest.raises(NotFoundError):
        await directory.update_organization(uuid4(), name="Nobody")


# ============================================================================
# Memberships
# ============================================================================

@pytest.mark.asyncio
async def test_user_organizations_in_joining_order(directory, test_user_1, test_user_2, test_org_1, test_org_2):
    await directory.ensure_user_org_access(test_user_1.id, test_org_2.id)

    organizations = await directory.get_user_organizations(test_user_1.id)

    assert [o.id for o in organizations] == [test_org_1.id, test_org_2.id]
    assert [o.id for o in await directory.get_user_organizations(test_user_2.id)] == [test_org_2.id]


@pytest.mark.asyncio
async def test_user_without_organizations(directory):
    user = await directory.create_user("new@example.org")

    assert await directory.get_user_organizations(user.id) == []


@pytest.mark.asyncio
async def test_ensure_access_is_idempotent(directory, test_user_1, test_user_2, test_org_2):
    await directory.ensure_user_org_access(test_user_1.id, test_org_2.id)
    await directory.ensure_user_org_access(test_user_1.id, test_org_2.id)

    members = await directory.get_members(test_org_2.id)

    assert sorted(members) == sorted([test_user_1.id, test_user_2.id])
    assert len(members) == 2


@pytest.mark.asyncio
async def test_ensure_access_records_login(directory, test_user_1, test_org_1):
    assert test_user_1.last_login_at is None

    await directory.ensure_user_org_access(test_user_1.id, test_org_1.id)

    user = await directory.get_user(test_user_1.id)
    assert user.last_login_at is not None


@pytest.mark.asyncio
async def test_ensure_access_unknown_organization(directory, test_user_1):
    with pytest.raises(NotFoundError):
        await directory.ensure_user_org_access(test_user_1.id, uuid4())


@pytest.mark.asyncio
async def test_ensure_access_unknown_user(directory, test_org_1):
    with pytest.raises(NotFoundError):
        await directory.ensure_user_org_access(uuid4(), test_org_1.id)


@pytest.mark.asyncio
async def test_dangling_membership_skipped(directory, db_session, test_user_1, test_org_1):
    """A membership whose organization row is gone is not listed."""
    # SQLite does not enforce the foreign key, so the stale row can exist
    db_session.add(OrganizationMember(user_id=test_user_1.id, organization_id=uuid4()))
    await db_session.commit()

    organizations = await directory.get_user_organizations(test_user_1.id)

    assert [o.id for o in organizations] == [test_org_1.id]


@pytest.mark.asyncio
async def test_update_unknown_timezone_rejected(directory, test_org_1):
    with pytest.raises(ValidationError):
        await directory.update_organization(test_org_1.id, timezone="Mars/Olympus_Mons")

    organization = await directory.get_organization(test_org_1.id)
    assert organization.timezone == "Africa/Nairobi"
