"""Role checks and role-based navigation."""
from __future__ import annotations

from typing import Dict, Optional

from guestpost.domain.models import Role, User

LOGIN_PATH = "/login"

DASHBOARD_PATHS: Dict[Role, str] = {
    Role.ADMIN: "/admin-dashboard",
    Role.SELLER: "/seller-dashboard",
    Role.BUYER: "/buyer-dashboard",
}


class AuthenticationRequiredError(Exception):
    """No user is logged in."""


class AuthorizationError(Exception):
    """The current user's role does not allow the action."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


def dashboard_path(user: Optional[User]) -> str:
    if user is None:
        return LOGIN_PATH
    return DASHBOARD_PATHS[user.role]


def require_user(user: Optional[User]) -> User:
    if user is None:
        raise AuthenticationRequiredError("Login required")
    return user


def require_role(user: Optional[User], role: Role, message: str | None = None) -> User:
    current = require_user(user)
    if current.role is not role:
        raise AuthorizationError(message or f"Only {role.value}s can perform this action.")
    return current
