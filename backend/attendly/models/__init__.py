"""Database models for Attendly."""

from attendly.models.base import Base
from attendly.models.organization import Organization
from attendly.models.user import OrganizationMember, User
from attendly.models.service import Service
from attendly.models.visitor import Visitor

__all__ = [
    "Base",
    "Organization",
    "User",
    "OrganizationMember",
    "Service",
    "Visitor",
]
