from __future__ import annotations

import itertools

import pytest

from guestpost.domain.models import Order, OrderStatus, ServiceSnapshot
from guestpost.domain.workflow import InvalidTransitionError, can_transition, ensure_transition, is_terminal
from guestpost.services.catalog_service import CatalogService, ServiceForm, ServiceNotFoundError
from guestpost.services.order_service import (
    MESSAGE_REQUIRED_NOTICE,
    OrderAccessError,
    OrderRejectedError,
    OrderService,
)
from guestpost.services.permissions import AuthenticationRequiredError, AuthorizationError

ALLOWED = {
    (OrderStatus.PENDING, OrderStatus.ACCEPTED),
    (OrderStatus.PENDING, OrderStatus.CANCELLED),
    (OrderStatus.ACCEPTED, OrderStatus.COMPLETED),
}


def test_transition_table():
    for current, target in itertools.product(OrderStatus, OrderStatus):
        assert can_transition(current, target) is ((current, target) in ALLOWED)
    assert is_terminal(OrderStatus.COMPLETED)
    assert is_terminal(OrderStatus.CANCELLED)
    assert not is_terminal(OrderStatus.PENDING)


def test_no_path_returns_to_pending():
    for current in OrderStatus:
        with pytest.raises(InvalidTransitionError):
            ensure_transition(current, OrderStatus.PENDING)


def test_buyer_places_pending_order_with_snapshot(repo, make_user, make_service):
    seller = make_user("seller", first_name="Rui", last_name="Costa")
    buyer = make_user("buyer")
    service = make_service(seller, title="News site", price=250)

    order = OrderService(repo).place_order(buyer, service.id, "Article about solar panels")

    stored = repo.get_order(order.id)
    assert stored.status is OrderStatus.PENDING
    assert (stored.buyer_id, stored.seller_id, stored.service_id) == (buyer.id, seller.id, service.id)
    assert stored.service == ServiceSnapshot("News site", 250, "Rui Costa", seller.phone)
    assert stored.created_at.endswith("Z")


def test_snapshot_survives_later_listing_edits(repo, make_user, make_service):
    seller = make_user("seller")
    buyer = make_user("buyer")
    service = make_service(seller, title="Old title", price=100)
    order = OrderService(repo).place_order(buyer, service.id, "Please publish next week")

    form = ServiceForm.parse(
        title="New title", description="d", price="999", website_url="https://x.example", da="10", dr="10", traffic="1K"
    )
    CatalogService(repo).update_service(seller, service.id, form)

    snapshot = repo.get_order(order.id).service
    assert (snapshot.title, snapshot.price) == ("Old title", 100)


def test_order_requires_logged_in_buyer_and_message(repo, make_user, make_service):
    seller = make_user("seller")
    service = make_service(seller)
    svc = OrderService(repo)

    with pytest.raises(AuthenticationRequiredError):
        svc.place_order(None, service.id, "hello")
    with pytest.raises(AuthorizationError):
        svc.place_order(seller, service.id, "hello")
    with pytest.raises(AuthorizationError):
        svc.place_order(make_user("admin"), service.id, "hello")
    with pytest.raises(OrderRejectedError) as blank:
        svc.place_order(make_user("buyer"), service.id, "   ")
    assert blank.value.message == MESSAGE_REQUIRED_NOTICE
    assert repo.list_orders() == []


def test_order_targets_only_approved_services(repo, make_user, make_service):
    seller = make_user("seller")
    hidden = make_service(seller, approved=False)

    with pytest.raises(ServiceNotFoundError):
        OrderService(repo).place_order(make_user("buyer"), hidden.id, "hello")


def test_seller_walks_order_to_completion(repo, make_user, make_service):
    seller = make_user("seller")
    service = make_service(seller)
    svc = OrderService(repo)
    order = svc.place_order(make_user("buyer"), service.id, "hello")

    assert svc.change_status(seller, order.id, "accepted").status is OrderStatus.ACCEPTED
    with pytest.raises(InvalidTransitionError):
        svc.change_status(seller, order.id, "cancelled")
    assert svc.change_status(seller, order.id, OrderStatus.COMPLETED).status is OrderStatus.COMPLETED
    for target in ("pending", "accepted", "cancelled"):
        with pytest.raises(InvalidTransitionError):
            svc.change_status(seller, order.id, target)
    assert repo.get_order(order.id).status is OrderStatus.COMPLETED


def test_cancelled_order_is_terminal(repo, make_user, make_service):
    seller = make_user("seller")
    svc = OrderService(repo)
    order = svc.place_order(make_user("buyer"), make_service(seller).id, "hello")

    svc.change_status(seller, order.id, "cancelled")

    with pytest.raises(InvalidTransitionError):
        svc.change_status(seller, order.id, "accepted")


def test_only_the_addressed_seller_moves_an_order(repo, make_user, make_service):
    seller = make_user("seller")
    other = make_user("seller")
    buyer = make_user("buyer")
    svc = OrderService(repo)
    order = svc.place_order(buyer, make_service(seller).id, "hello")

    with pytest.raises(OrderAccessError):
        svc.change_status(other, order.id, "accepted")
    with pytest.raises(AuthorizationError):
        svc.change_status(buyer, order.id, "cancelled")
    with pytest.raises(OrderRejectedError):
        svc.change_status(seller, order.id, "shipped")
    assert repo.get_order(order.id).status is OrderStatus.PENDING


def _order(order_id, buyer_id, seller_id, status, created_at):
    return Order(
        id=order_id,
        service_id="svc",
        buyer_id=buyer_id,
        seller_id=seller_id,
        status=status,
        message="m",
        created_at=created_at,
        service=ServiceSnapshot("t", 10, "s", "p"),
    )


def test_buyer_listing_is_newest_first_and_filtered_by_tab(repo, make_user):
    buyer = make_user("buyer")
    repo.save_orders(
        [
            _order("1", buyer.id, "s1", OrderStatus.PENDING, "2024-01-01T10:00:00.000Z"),
            _order("2", buyer.id, "s1", OrderStatus.COMPLETED, "2024-03-01T10:00:00.000Z"),
            _order("3", "someone-else", "s1", OrderStatus.PENDING, "2024-04-01T10:00:00.000Z"),
            _order("4", buyer.id, "s2", OrderStatus.PENDING, "2024-02-01T10:00:00.000Z"),
        ]
    )
    svc = OrderService(repo)

    assert [o.id for o in svc.buyer_orders(buyer)] == ["2", "4", "1"]
    assert [o.id for o in svc.buyer_orders(buyer, "pending")] == ["4", "1"]
    assert [o.id for o in svc.buyer_orders(buyer, "completed")] == ["2"]
    assert [o.id for o in svc.all_orders()] == ["3", "2", "4", "1"]


def test_seller_listing_only_shows_their_orders(repo, make_user):
    seller = make_user("seller")
    repo.save_orders(
        [
            _order("1", "b", seller.id, OrderStatus.PENDING, "2024-01-01T10:00:00.000Z"),
            _order("2", "b", "other", OrderStatus.PENDING, "2024-02-01T10:00:00.000Z"),
            _order("3", "b", seller.id, OrderStatus.ACCEPTED, "2024-03-01T10:00:00.000Z"),
        ]
    )

    assert [o.id for o in OrderService(repo).seller_orders(seller)] == ["3", "1"]
