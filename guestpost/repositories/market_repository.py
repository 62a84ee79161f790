"""Typed access to the marketplace collections stored as JSON documents."""
from __future__ import annotations

from typing import Callable, Dict, Iterable, List, Optional

from guestpost.domain.models import Order, Role, Service, User

from .kv_store import KeyValueStore
from .local_storage import LocalStorage

CURRENT_USER_KEY = "currentUser"
USERS_KEY = "users"
PASSWORDS_KEY = "passwords"
SERVICES_KEY = "services"
ORDERS_KEY = "orders"


class MarketRepository:
    """
    Whole-collection read/write helpers.

    Each ``list_*`` reads the full collection and each ``save_*`` replaces
    it. Mutating helpers are read-modify-write with no concurrency token, so
    the last writer wins.
    """

    def __init__(self, store: KeyValueStore) -> None:
        self.storage = LocalStorage(store)

    # -------------------------- users --------------------------
    def list_users(self) -> List[User]:
        return [User.from_dict(raw) for raw in self.storage.get_json(USERS_KEY, [])]

    def save_users(self, users: Iterable[User]) -> None:
        self.storage.set_json(USERS_KEY, [u.to_dict() for u in users])

    def get_user(self, user_id: str) -> Optional[User]:
        return next((u for u in self.list_users() if u.id == user_id), None)

    def get_user_by_email(self, email: str) -> Optional[User]:
        return next((u for u in self.list_users() if u.email == email), None)

    def add_user(self, user: User) -> None:
        users = self.list_users()
        users.append(user)
        self.save_users(users)

    def update_user(self, user_id: str, change: Callable[[User], None]) -> Optional[User]:
        users = self.list_users()
        found = None
        for user in users:
            if user.id == user_id:
                change(user)
                found = user
        if found:
            self.save_users(users)
        return found

    def has_admin(self) -> bool:
        return any(u.role is Role.ADMIN for u in self.list_users())

    # -------------------------- credentials --------------------------
    def get_passwords(self) -> Dict[str, str]:
        return self.storage.get_json(PASSWORDS_KEY, {})

    def get_password(self, email: str) -> Optional[str]:
        return self.get_passwords().get(email)

    def set_password(self, email: str, stored: str) -> None:
        passwords = self.get_passwords()
        passwords[email] = stored
        self.storage.set_json(PASSWORDS_KEY, passwords)

    def delete_password(self, email: str) -> None:
        passwords = self.get_passwords()
        if passwords.pop(email, None) is not None:
            self.storage.set_json(PASSWORDS_KEY, passwords)

    # -------------------------- services --------------------------
    def list_services(self) -> List[Service]:
        return [Service.from_dict(raw) for raw in self.storage.get_json(SERVICES_KEY, [])]

    def save_services(self, services: Iterable[Service]) -> None:
        self.storage.set_json(SERVICES_KEY, [s.to_dict() for s in services])

    def get_service(self, service_id: str) -> Optional[Service]:
        return next((s for s in self.list_services() if s.id == service_id), None)

    def add_service(self, service: Service) -> None:
        services = self.list_services()
        services.append(service)
        self.save_services(services)

    def update_service(self, service_id: str, change: Callable[[Service], None]) -> Optional[Service]:
        services = self.list_services()
        found = None
        for service in services:
            if service.id == service_id:
                change(service)
                found = service
        if found:
            self.save_services(services)
        return found

    def delete_service(self, service_id: str) -> bool:
        services = self.list_services()
        remaining = [s for s in services if s.id != service_id]
        self.save_services(remaining)
        return len(remaining) != len(services)

    # -------------------------- orders --------------------------
    def list_orders(self) -> List[Order]:
        return [Order.from_dict(raw) for raw in self.storage.get_json(ORDERS_KEY, [])]

    def save_orders(self, orders: Iterable[Order]) -> None:
        self.storage.set_json(ORDERS_KEY, [o.to_dict() for o in orders])

    def get_order(self, order_id: str) -> Optional[Order]:
        return next((o for o in self.list_orders() if o.id == order_id), None)

    def add_order(self, order: Order) -> None:
        orders = self.list_orders()
        orders.append(order)
        self.save_orders(orders)

    def update_order(self, order_id: str, change: Callable[[Order], None]) -> Optional[Order]:
        orders = self.list_orders()
        found = None
        for order in orders:
            if order.id == order_id:
                change(order)
                found = order
        if found:
            self.save_orders(orders)
        return found

    # -------------------------- session pointer --------------------------
    def get_current_user(self) -> Optional[User]:
        raw = self.storage.get_json(CURRENT_USER_KEY)
        return User.from_dict(raw) if raw else None

    def set_current_user(self, user: User) -> None:
        self.storage.set_json(CURRENT_USER_KEY, user.to_dict())

    def clear_current_user(self) -> None:
        self.storage.remove(CURRENT_USER_KEY)
