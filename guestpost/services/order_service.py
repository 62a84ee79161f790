"""Order placement and the seller-driven status workflow."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional

from guestpost.core.utils import new_id, parse_iso, utc_now_iso
from guestpost.domain.models import Order, OrderStatus, Role, User
from guestpost.domain.workflow import ensure_transition
from guestpost.repositories.market_repository import MarketRepository
from guestpost.services.catalog_service import CatalogService
from guestpost.services.permissions import require_role

logger = logging.getLogger(__name__)

ORDER_PLACED_NOTICE = "Order placed successfully! The seller will contact you soon."
BUYERS_ONLY_NOTICE = "Only buyers can place orders. Please register as a buyer."
MESSAGE_REQUIRED_NOTICE = "Please provide details about your requirements."

TAB_ALL = "all"
BUYER_TABS = (TAB_ALL, OrderStatus.PENDING.value, OrderStatus.ACCEPTED.value, OrderStatus.COMPLETED.value)


class OrderError(Exception):
    """Base exception for order workflows."""


class OrderNotFoundError(OrderError):
    pass


class OrderAccessError(OrderError):
    """Raised when a seller acts on an order addressed to someone else."""


class OrderRejectedError(OrderError):
    """Order input refused (blank requirements message, unknown status)."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


def newest_first(orders: List[Order]) -> List[Order]:
    return sorted(orders, key=lambda o: parse_iso(o.created_at), reverse=True)


@dataclass
class OrderService:
    repository: MarketRepository

    def __post_init__(self):
        self.catalog = CatalogService(self.repository)

    def place_order(self, user: Optional[User], service_id: str, message: str) -> Order:
        """
        Create a pending order for an approved listing.

        Only the buyer role is checked; whether the buyer owns the listing is
        not verified.
        """
        buyer = require_role(user, Role.BUYER, BUYERS_ONLY_NOTICE)
        text = (message or "").strip()
        if not text:
            raise OrderRejectedError(MESSAGE_REQUIRED_NOTICE)
        service = self.catalog.get_public_service(service_id)
        order = Order(
            id=new_id(),
            service_id=service.id,
            buyer_id=buyer.id,
            seller_id=service.seller_id,
            status=OrderStatus.PENDING,
            message=message,
            created_at=utc_now_iso(),
            service=service.snapshot(),
        )
        self.repository.add_order(order)
        logger.info("Buyer %s ordered service %s (order %s)", buyer.id, service.id, order.id)
        return order

    def change_status(self, user: Optional[User], order_id: str, new_status: str | OrderStatus) -> Order:
        """Seller moves one of their orders along the workflow."""
        seller = require_role(user, Role.SELLER, "Only sellers can update orders.")
        try:
            target = OrderStatus(new_status)
        except ValueError:
            raise OrderRejectedError(f"Unknown order status: {new_status}") from None
        order = self.repository.get_order(order_id)
        if not order:
            raise OrderNotFoundError(f"Order {order_id} not found")
        if order.seller_id != seller.id:
            raise OrderAccessError("You can only update your own orders.")
        ensure_transition(order.status, target)

        def _change(entity: Order) -> None:
            entity.status = target

        updated = self.repository.update_order(order_id, _change)
        if updated is None:
            raise OrderNotFoundError(f"Order {order_id} not found")
        logger.info("Order %s moved %s -> %s by seller %s", order_id, order.status.value, target.value, seller.id)
        return updated

    # -------------------------- listings --------------------------
    def buyer_orders(self, user: Optional[User], tab: str = TAB_ALL) -> List[Order]:
        buyer = require_role(user, Role.BUYER, "Only buyers have a buyer dashboard.")
        orders = newest_first([o for o in self.repository.list_orders() if o.buyer_id == buyer.id])
        if tab in (None, "", TAB_ALL):
            return orders
        return [o for o in orders if o.status.value == tab]

    def seller_orders(self, user: Optional[User]) -> List[Order]:
        seller = require_role(user, Role.SELLER, "Only sellers have a seller dashboard.")
        return newest_first([o for o in self.repository.list_orders() if o.seller_id == seller.id])

    def all_orders(self) -> List[Order]:
        return newest_first(self.repository.list_orders())
