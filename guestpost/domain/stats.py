"""Dashboard counters."""
from __future__ import annotations

from typing import Iterable, List

from .models import Order, OrderStatus, Role, Service, User

AVERAGE_RATING = 4.8


def _count_status(orders: List[Order], status: OrderStatus) -> int:
    return sum(1 for o in orders if o.status is status)


def completed_total(orders: Iterable[Order]) -> int:
    """Sum of snapshot prices over completed orders."""
    return sum(o.service.price for o in orders if o.status is OrderStatus.COMPLETED)


def home_stats(users: Iterable[User], services: Iterable[Service], orders: Iterable[Order]) -> dict:
    users, services, orders = list(users), list(services), list(orders)
    return {
        "totalServices": sum(1 for s in services if s.is_approved),
        "totalSellers": sum(1 for u in users if u.role is Role.SELLER and u.is_approved),
        "totalOrders": len(orders),
        "avgRating": AVERAGE_RATING,
    }


def buyer_stats(orders: Iterable[Order]) -> dict:
    orders = list(orders)
    return {
        "total": len(orders),
        "pending": _count_status(orders, OrderStatus.PENDING),
        "accepted": _count_status(orders, OrderStatus.ACCEPTED),
        "completed": _count_status(orders, OrderStatus.COMPLETED),
        "totalSpent": completed_total(orders),
    }


def seller_stats(services: Iterable[Service], orders: Iterable[Order]) -> dict:
    services, orders = list(services), list(orders)
    return {
        "totalServices": len(services),
        "approvedServices": sum(1 for s in services if s.is_approved),
        "pendingServices": sum(1 for s in services if not s.is_approved),
        "totalOrders": len(orders),
        "pendingOrders": _count_status(orders, OrderStatus.PENDING),
        "completedOrders": _count_status(orders, OrderStatus.COMPLETED),
        "totalEarnings": completed_total(orders),
    }


def admin_stats(users: Iterable[User], services: Iterable[Service], orders: Iterable[Order]) -> dict:
    members = [u for u in users if u.role is not Role.ADMIN]
    services, orders = list(services), list(orders)
    return {
        "totalUsers": len(members),
        "totalBuyers": sum(1 for u in members if u.role is Role.BUYER),
        "totalSellers": sum(1 for u in members if u.role is Role.SELLER),
        "pendingUsers": sum(1 for u in members if u.role is Role.SELLER and not u.is_approved),
        "totalServices": len(services),
        "approvedServices": sum(1 for s in services if s.is_approved),
        "pendingServices": sum(1 for s in services if not s.is_approved),
        "totalOrders": len(orders),
        "pendingOrders": _count_status(orders, OrderStatus.PENDING),
        "completedOrders": _count_status(orders, OrderStatus.COMPLETED),
        "totalRevenue": completed_total(orders),
    }
