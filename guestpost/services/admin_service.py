"""Administrator use cases: approvals, deletions and dashboard listings."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional

from guestpost.domain import catalog, stats
from guestpost.domain.models import Order, Role, Service, User
from guestpost.repositories.market_repository import MarketRepository
from guestpost.services.order_service import newest_first
from guestpost.services.permissions import require_role

logger = logging.getLogger(__name__)

USER_DELETED_NOTICE = "User and all related data have been deleted."
SERVICE_DELETED_NOTICE = "Service has been deleted."
ADMINS_ONLY = "Only administrators can perform this action."


class AdminError(Exception):
    """Base exception for administrator workflows."""


class TargetNotFoundError(AdminError):
    pass


class TargetRoleError(AdminError):
    """The target account cannot take this action (not a seller, or an admin)."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


@dataclass
class AdminDashboard:
    stats: dict
    users: List[User]
    services: List[Service]
    orders: List[Order]


def _verdict(approved: bool) -> str:
    return "approved" if approved else "rejected"


@dataclass
class AdminService:
    repository: MarketRepository

    def _require_admin(self, user: Optional[User]) -> User:
        return require_role(user, Role.ADMIN, ADMINS_ONLY)

    # -------------------------- approvals --------------------------
    def set_seller_approval(self, user: Optional[User], user_id: str, approved: bool) -> str:
        """Only seller accounts carry a meaningful approval flag."""
        admin = self._require_admin(user)
        current = self.repository.get_user(user_id)
        if not current:
            raise TargetNotFoundError(f"User {user_id} not found")
        if current.role is not Role.SELLER:
            raise TargetRoleError("Only seller accounts can be approved or rejected.")

        def _change(target: User) -> None:
            target.is_approved = approved

        target = self.repository.update_user(user_id, _change)
        if not target:
            raise TargetNotFoundError(f"User {user_id} not found")
        logger.info("Admin %s %s account %s", admin.id, _verdict(approved), user_id)
        return f"{target.first_name}'s account has been {_verdict(approved)}!"

    def set_service_approval(self, user: Optional[User], service_id: str, approved: bool) -> str:
        admin = self._require_admin(user)

        def _change(target: Service) -> None:
            target.is_approved = approved

        target = self.repository.update_service(service_id, _change)
        if not target:
            raise TargetNotFoundError(f"Service {service_id} not found")
        logger.info("Admin %s %s service %s", admin.id, _verdict(approved), service_id)
        return f'Service "{target.title}" has been {_verdict(approved)}!'

    # -------------------------- deletions --------------------------
    def delete_user(self, user: Optional[User], user_id: str) -> str:
        """Remove a user, their listings, every order they are party to and their credential."""
        admin = self._require_admin(user)
        users = self.repository.list_users()
        target = next((u for u in users if u.id == user_id), None)
        if not target:
            raise TargetNotFoundError(f"User {user_id} not found")
        if target.role is Role.ADMIN:
            raise TargetRoleError("Administrator accounts cannot be deleted.")

        self.repository.save_users([u for u in users if u.id != user_id])
        self.repository.save_services([s for s in self.repository.list_services() if s.seller_id != user_id])
        self.repository.save_orders(
            [o for o in self.repository.list_orders() if o.buyer_id != user_id and o.seller_id != user_id]
        )
        self.repository.delete_password(target.email)
        logger.info("Admin %s deleted user %s and related data", admin.id, user_id)
        return USER_DELETED_NOTICE

    def delete_service(self, user: Optional[User], service_id: str) -> str:
        admin = self._require_admin(user)
        if not self.repository.delete_service(service_id):
            raise TargetNotFoundError(f"Service {service_id} not found")
        logger.info("Admin %s deleted service %s", admin.id, service_id)
        return SERVICE_DELETED_NOTICE

    # -------------------------- dashboard --------------------------
    def dashboard(self, user: Optional[User], search: str = "", status: str = catalog.STATUS_ALL) -> AdminDashboard:
        self._require_admin(user)
        users = self.repository.list_users()
        services = self.repository.list_services()
        orders = self.repository.list_orders()
        return AdminDashboard(
            stats=stats.admin_stats(users, services, orders),
            users=catalog.filter_users_for_admin(users, search, status),
            services=catalog.filter_services_for_admin(services, search, status),
            orders=newest_first(orders),
        )
