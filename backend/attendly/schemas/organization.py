"""Pydantic schemas for Organization API."""

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field


class OrganizationCreate(BaseModel):
    """Schema for creating a new organization (sign-up flow)."""

    name: str = Field(..., min_length=1, max_length=255, description="Organization name")
    type: str = Field(..., min_length=1, max_length=100, description="Category label")
    country: str = Field(..., min_length=1, max_length=100, description="Country name")
    phone: str = Field("", max_length=50, description="Contact phone")
    estimated_attendance: Optional[str] = Field(None, max_length=50)
    how_did_you_hear: Optional[str] = Field(None, max_length=255)


class OrganizationUpdate(BaseModel):
    """
    Explicit settings update.

    currency and timezone are only changed when supplied; changing the
    country alone leaves them untouched.
    """

    name: Optional[str] = Field(None, min_length=1, max_length=255)
    type: Optional[str] = Field(None, min_length=1, max_length=100)
    country: Optional[str] = Field(None, min_length=1, max_length=100)
    phone: Optional[str] = Field(None, max_length=50)
    currency: Optional[str] = Field(None, min_length=3, max_length=3)
    timezone: Optional[str] = Field(None, min_length=1, max_length=64)


class OrganizationSettings(BaseModel):
    """Locale settings of an organization."""

    currency: str
    timezone: str


class OrganizationResponse(BaseModel):
    """Organization with its members and settings."""

    id: UUID
    name: str
    type: str
    country: str
    phone: str
    owner_id: UUID
    members: list[UUID] = Field(default_factory=list, description="User ids with access")
    settings: OrganizationSettings
    estimated_attendance: Optional[str] = None
    how_did_you_hear: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class MembershipRequest(BaseModel):
    """Grant a user access to an organization."""

    user_id: UUID = Field(..., description="User to add as a member")


class UserCreate(BaseModel):
    """Register the authenticated caller as a user."""

    email: str = Field(..., min_length=3, max_length=255)
    full_name: str = Field("", max_length=255)


class UserResponse(BaseModel):
    """User account."""

    id: UUID
    email: str
    full_name: str
    created_at: datetime
    last_login_at: Optional[datetime] = None

    class Config:
        """Pydantic config."""

        from_attributes = True
