"""API dependencies."""

from attendly.api.dependencies.auth import CurrentUser, get_current_user, get_member_organization

__all__ = [
    "CurrentUser",
    "get_current_user",
    "get_member_organization",
]
