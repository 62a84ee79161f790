"""
Authentication and identity related use cases.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional

from guestpost.core.config import get_settings
from guestpost.core.security import encode_password, hash_password, is_hashed, verify_password
from guestpost.core.utils import new_id
from guestpost.domain.models import Role, User
from guestpost.repositories.market_repository import MarketRepository
from guestpost.services.permissions import LOGIN_PATH, dashboard_path
from guestpost.services.session_service import SessionService

logger = logging.getLogger(__name__)

DEFAULT_ADMIN_ID = "admin-001"
PENDING_APPROVAL_NOTICE = "Your seller account is pending approval. Please wait for admin approval."
SELLER_REGISTERED_NOTICE = (
    "Registration successful! Your seller account is pending admin approval. "
    "You will be notified once approved."
)
REGISTRABLE_ROLES = (Role.BUYER, Role.SELLER)


class AuthError(Exception):
    """Base class for authentication-related exceptions."""


class RegistrationError(AuthError):
    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class AccountExistsError(AuthError):
    pass


class InvalidCredentialsError(AuthError):
    pass


class SellerPendingApprovalError(AuthError):
    def __init__(self, message: str = PENDING_APPROVAL_NOTICE):
        super().__init__(message)
        self.message = message


@dataclass
class RegisterResult:
    user: User
    session_started: bool
    redirect_to: str
    notice: str = ""


@dataclass
class LoginSuccess:
    user: User
    redirect_to: str


@dataclass
class AuthService:
    """Handles registration, login, logout and the default administrator."""

    repository: MarketRepository
    sessions: SessionService = field(init=False)

    def __post_init__(self):
        self.settings = get_settings()
        self.sessions = SessionService(self.repository)

    # -------------------------------------- bootstrap --------------------------------------
    def ensure_default_admin(self) -> Optional[User]:
        """Seed the administrator account when no admin exists yet."""
        if self.repository.has_admin():
            return None
        admin = User(
            id=DEFAULT_ADMIN_ID,
            first_name="Admin",
            last_name="User",
            email=self.settings.admin_email,
            phone="+1234567890",
            country="United States",
            city="New York",
            role=Role.ADMIN,
            is_approved=True,
        )
        self.repository.add_user(admin)
        self.repository.set_password(
            admin.email, encode_password(self.settings.admin_password, hashing=self.settings.password_hashing)
        )
        logger.info("Seeded default administrator %s", admin.email)
        return admin

    # -------------------------------------- registration --------------------------------------
    def _validate_registration(self, profile: dict, role: str, password: str, confirm_password: Optional[str]) -> Role:
        for label, value in profile.items():
            if not value:
                raise RegistrationError(f"{label} is required")
        try:
            parsed_role = Role(role)
        except ValueError:
            raise RegistrationError("Choose buyer or seller") from None
        if parsed_role not in REGISTRABLE_ROLES:
            raise RegistrationError("Choose buyer or seller")
        if confirm_password is not None and password != confirm_password:
            raise RegistrationError("Passwords do not match")
        minimum = self.settings.min_password_length
        if len(password or "") < minimum:
            raise RegistrationError(f"Password must be at least {minimum} characters long")
        return parsed_role

    def register(
        self,
        *,
        first_name: str,
        last_name: str,
        email: str,
        phone: str,
        country: str,
        city: str,
        role: str,
        password: str,
        confirm_password: Optional[str] = None,
    ) -> RegisterResult:
        profile = {
            "First name": (first_name or "").strip(),
            "Last name": (last_name or "").strip(),
            "Email": (email or "").strip(),
            "Phone": (phone or "").strip(),
            "Country": (country or "").strip(),
            "City": (city or "").strip(),
        }
        raw_email = profile["Email"]
        parsed_role = self._validate_registration(profile, role, password, confirm_password)
        if self.repository.get_user_by_email(raw_email):
            logger.warning("Registration refused, email already exists: %s", raw_email)
            raise AccountExistsError("Email already exists. Please use a different email.")

        user = User(
            id=new_id(),
            first_name=profile["First name"],
            last_name=profile["Last name"],
            email=raw_email,
            phone=profile["Phone"],
            country=profile["Country"],
            city=profile["City"],
            role=parsed_role,
            is_approved=parsed_role is Role.BUYER,
        )
        self.repository.add_user(user)
        self.repository.set_password(raw_email, encode_password(password, hashing=self.settings.password_hashing))
        logger.info("Registered %s %s", parsed_role.value, raw_email)

        if parsed_role is Role.BUYER:
            self.sessions.start(user)
            return RegisterResult(user=user, session_started=True, redirect_to=dashboard_path(user))
        return RegisterResult(user=user, session_started=False, redirect_to=LOGIN_PATH, notice=SELLER_REGISTERED_NOTICE)

    # -------------------------------------- login --------------------------------------
    def login(self, email: str, password: str) -> LoginSuccess:
        raw_email = (email or "").strip()
        user = self.repository.get_user_by_email(raw_email) if raw_email else None
        stored = self.repository.get_password(raw_email) if user else None
        if not user or not verify_password(password, stored):
            logger.warning("Failed login for %s", raw_email or "<empty>")
            raise InvalidCredentialsError("Invalid email or password")
        if user.role is Role.SELLER and not user.is_approved:
            logger.warning("Login blocked, seller %s not approved", raw_email)
            raise SellerPendingApprovalError()
        if self.settings.password_hashing and not is_hashed(stored):
            self.repository.set_password(raw_email, hash_password(password))

        self.sessions.start(user)
        return LoginSuccess(user=user, redirect_to=dashboard_path(user))

    def logout(self) -> None:
        """Clear the current-user pointer; collections are left untouched."""
        self.sessions.end()

    def current_user(self) -> Optional[User]:
        return self.sessions.current_user()
