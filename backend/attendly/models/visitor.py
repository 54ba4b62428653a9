"""Visitor model - First-time guests recorded with a service."""

from datetime import datetime
from typing import Optional
from uuid import UUID

from sqlalchemy import DateTime, ForeignKey, Index, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from attendly.models.base import Base, CreatedAtMixin, TenantMixin, UUIDPrimaryKeyMixin

VISITOR_NAME_MAX_LENGTH = 100
VISITOR_CONTACT_MAX_LENGTH = 500


class Visitor(Base, UUIDPrimaryKeyMixin, TenantMixin, CreatedAtMixin):
    """
    Visitor model.

    Owned by exactly one Service and immutable once written. The owning
    organization_id is copied from the parent so tenant filters and RLS
    policies apply to this table directly.
    """

    __tablename__ = "visitors"
    __table_args__ = (
        Index("idx_visitors_organization_service", "organization_id", "service_id"),
    )

    service_id: Mapped[UUID] = mapped_column(
        Uuid,
        ForeignKey("services.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
        comment="Service this visitor attended",
    )

    visitor_name: Mapped[Optional[str]] = mapped_column(
        String(VISITOR_NAME_MAX_LENGTH),
        nullable=True,
    )

    visitor_contact: Mapped[Optional[str]] = mapped_column(
        String(VISITOR_CONTACT_MAX_LENGTH),
        nullable=True,
        comment="Phone/email or several imported columns joined with ' | '",
    )

    visit_date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        comment="Copied from the parent service_date",
    )

    def __repr__(self) -> str:
        """String representation."""
        return f"<Visitor id={self.id} service={self.service_id}>"
