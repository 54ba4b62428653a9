"""Organizations and users API endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from attendly.api.dependencies import CurrentUser, get_current_user, get_member_organization
from attendly.core.database import get_db
from attendly.models.organization import Organization
from attendly.schemas.organization import (
    MembershipRequest,
    OrganizationCreate,
    OrganizationResponse,
    OrganizationSettings,
    OrganizationUpdate,
    UserCreate,
    UserResponse,
)
from attendly.services.organizations import OrganizationDirectory

router = APIRouter()


async def _to_response(directory: OrganizationDirectory, organization: Organization) -> OrganizationResponse:
    return OrganizationResponse(
        id=organization.id,
        name=organization.name,
        type=organization.type,
        country=organization.country,
        phone=organization.phone,
        owner_id=organization.owner_id,
        members=await directory.get_members(organization.id),
        settings=OrganizationSettings(currency=organization.currency, timezone=organization.timezone),
        estimated_attendance=organization.estimated_attendance,
        how_did_you_hear=organization.how_did_you_hear,
        created_at=organization.created_at,
        updated_at=organization.updated_at,
    )


@router.post(
    "/users",
    response_model=UserResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register caller",
    description="Create the user row for the authenticated caller (called once after sign-up).",
)
async def register_user(
    payload: UserCreate,
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> UserResponse:
    directory = OrganizationDirectory(db)
    user = await directory.create_user(payload.email, payload.full_name, user_id=current_user.id)
    return UserResponse.model_validate(user)


@router.post(
    "/organizations",
    response_model=OrganizationResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create organization",
    description="Create an organization owned by the caller. Currency and timezone are derived from the country.",
)
async def create_organization(
    payload: OrganizationCreate,
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> OrganizationResponse:
    directory = OrganizationDirectory(db)
    organization = await directory.create_organization(
        owner_id=current_user.id,
        name=payload.name,
        type=payload.type,
        country=payload.country,
        phone=payload.phone,
        estimated_attendance=payload.estimated_attendance,
        how_did_you_hear=payload.how_did_you_hear,
    )
    return await _to_response(directory, organization)


@router.get(
    "/organizations",
    response_model=list[OrganizationResponse],
    summary="List caller's organizations",
    description="An empty list means the caller should create an organization first.",
)
async def list_organizations(
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> list[OrganizationResponse]:
    directory = OrganizationDirectory(db)
    organizations = await directory.get_user_organizations(current_user.id)
    return [await _to_response(directory, organization) for organization in organizations]


@router.get(
    "/organizations/{org_id}",
    response_model=OrganizationResponse,
    summary="Get organization",
)
async def get_organization(
    organization: Annotated[Organization, Depends(get_member_organization)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> OrganizationResponse:
    return await _to_response(OrganizationDirectory(db), organization)


@router.patch(
    "/organizations/{org_id}",
    response_model=OrganizationResponse,
    summary="Update organization settings",
    description="Only supplied fields change. Changing the country does not change currency or timezone.",
)
async def update_organization(
    payload: OrganizationUpdate,
    organization: Annotated[Organization, Depends(get_member_organization)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> OrganizationResponse:
    directory = OrganizationDirectory(db)
    updated = await directory.update_organization(organization.id, **payload.model_dump(exclude_unset=True))
    return await _to_response(directory, updated)


@router.post(
    "/organizations/{org_id}/members",
    response_model=OrganizationResponse,
    summary="Grant access",
    description="Add a user to the organization. Idempotent.",
)
async def add_member(
    payload: MembershipRequest,
    organization: Annotated[Organization, Depends(get_member_organization)],
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> OrganizationResponse:
    if organization.owner_id != current_user.id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Only the owner can add members",
        )
    directory = OrganizationDirectory(db)
    await directory.ensure_user_org_access(payload.user_id, organization.id)
    return await _to_response(directory, organization)
