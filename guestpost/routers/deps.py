"""Accessors for the services configured on ``app.state``."""
from __future__ import annotations

from typing import Optional

from fastapi import Request
from fastapi.responses import JSONResponse, RedirectResponse

from guestpost.domain.models import Role, User
from guestpost.repositories.market_repository import MarketRepository
from guestpost.services.admin_service import AdminService
from guestpost.services.auth_service import AuthService
from guestpost.services.catalog_service import CatalogService
from guestpost.services.order_service import OrderService
from guestpost.services.permissions import LOGIN_PATH


def _state_attr(request: Request, name: str):
    svc = getattr(getattr(request.app, "state", None), name, None)
    if not svc:
        raise RuntimeError(f"{name} is not configured")
    return svc


def auth_service(request: Request) -> AuthService:
    return _state_attr(request, "auth_service")


def catalog_service(request: Request) -> CatalogService:
    return _state_attr(request, "catalog_service")


def order_service(request: Request) -> OrderService:
    return _state_attr(request, "order_service")


def admin_service(request: Request) -> AdminService:
    return _state_attr(request, "admin_service")


def current_user(request: Request) -> Optional[User]:
    return auth_service(request).current_user()


def user_with_role(request: Request, role: Role) -> Optional[User]:
    """Current user if their role matches ``role``, else None."""
    user = current_user(request)
    if user is None or user.role is not role:
        return None
    return user


def redirect_to_login(*, after_post: bool = False) -> RedirectResponse:
    return RedirectResponse(LOGIN_PATH, status_code=303 if after_post else 302)


def error(message: str, status_code: int) -> JSONResponse:
    return JSONResponse({"error": message}, status_code=status_code)


def repository(request: Request) -> MarketRepository:
    return _state_attr(request, "repository")
