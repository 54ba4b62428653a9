"""User and membership models."""

from datetime import datetime
from typing import Optional
from uuid import UUID

from sqlalchemy import DateTime, ForeignKey, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from attendly.models.base import Base, CreatedAtMixin, UUIDPrimaryKeyMixin


class User(Base, UUIDPrimaryKeyMixin, CreatedAtMixin):
    """
    User model.

    Authentication happens outside this service; the row exists so that
    organization membership has something to hang off.
    """

    __tablename__ = "users"

    email: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        unique=True,
        index=True,
        comment="Email address (used for login)",
    )

    full_name: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        default="",
    )

    last_login_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
        default=None,
        comment="Last time the user opened an organization",
    )

    def __repr__(self) -> str:
        """String representation."""
        return f"<User {self.email}>"


class OrganizationMember(Base, CreatedAtMixin):
    """
    Membership of a user in an organization.

    The composite primary key makes adding a membership a set union:
    the same pair can only exist once.
    """

    __tablename__ = "organization_members"

    user_id: Mapped[UUID] = mapped_column(
        Uuid,
        ForeignKey("users.id", ondelete="CASCADE"),
        primary_key=True,
    )

    organization_id: Mapped[UUID] = mapped_column(
        Uuid,
        ForeignKey("organizations.id", ondelete="CASCADE"),
        primary_key=True,
        index=True,
    )

    def __repr__(self) -> str:
        """String representation."""
        return f"<OrganizationMember user={self.user_id} org={self.organization_id}>"
