"""Pydantic schemas for request/response validation."""

from attendly.schemas.attendance import (
    AttendanceCreate,
    AttendanceCreateResult,
    ServiceResponse,
    VisitorImportRequest,
    VisitorImportResponse,
    VisitorInput,
    VisitorResponse,
)
from attendly.schemas.organization import (
    MembershipRequest,
    OrganizationCreate,
    OrganizationResponse,
    OrganizationSettings,
    OrganizationUpdate,
    UserCreate,
    UserResponse,
)
from attendly.schemas.statistics import MonthlyStats, MonthlyTotal, YearComparison

__all__ = [
    "AttendanceCreate",
    "AttendanceCreateResult",
    "ServiceResponse",
    "VisitorImportRequest",
    "VisitorImportResponse",
    "VisitorInput",
    "VisitorResponse",
    "MembershipRequest",
    "OrganizationCreate",
    "OrganizationResponse",
    "OrganizationSettings",
    "OrganizationUpdate",
    "UserCreate",
    "UserResponse",
    "MonthlyStats",
    "MonthlyTotal",
    "YearComparison",
]
