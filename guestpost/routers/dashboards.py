from __future__ import annotations

from fastapi import APIRouter, Form, HTTPException, Request
from fastapi.responses import RedirectResponse

from guestpost.domain import catalog, stats
from guestpost.domain.models import Role
from guestpost.domain.workflow import InvalidTransitionError
from guestpost.routers import deps
from guestpost.services.admin_service import TargetNotFoundError, TargetRoleError
from guestpost.services.catalog_service import (
    SERVICE_CREATED_NOTICE,
    SERVICE_UPDATED_NOTICE,
    SELLER_PENDING_NOTICE,
    ServiceAccessError,
    ServiceForm,
    ServiceNotFoundError,
    ValidationError,
)
from guestpost.services.order_service import (
    BUYER_TABS,
    TAB_ALL,
    OrderAccessError,
    OrderNotFoundError,
    OrderRejectedError,
)

router = APIRouter(prefix="", tags=["dashboards"])

SELLER_DASHBOARD = "/seller-dashboard"


# ------------------------------------------------ buyer ------------------------------------------------
@router.get("/buyer-dashboard")
def buyer_dashboard(request: Request, tab: str = TAB_ALL):
    buyer = deps.user_with_role(request, Role.BUYER)
    if not buyer:
        return deps.redirect_to_login()
    if tab not in BUYER_TABS:
        raise HTTPException(400, f"Unknown tab: {tab}")
    svc = deps.order_service(request)
    shown = svc.buyer_orders(buyer, tab)
    return {
        "user": buyer.to_dict(),
        "tab": tab,
        "stats": stats.buyer_stats(svc.buyer_orders(buyer)),
        "orders": [o.to_dict() for o in shown],
    }


# ------------------------------------------------ seller ------------------------------------------------
def _active_seller(request: Request):
    """(seller, response): response is set when the request must stop here."""
    seller = deps.user_with_role(request, Role.SELLER)
    if not seller:
        return None, deps.redirect_to_login(after_post=request.method == "POST")
    if not seller.is_approved:
        return None, deps.error(SELLER_PENDING_NOTICE, 403)
    return seller, None


def _service_form(title, description, price, website_url, da, dr, traffic) -> ServiceForm:
    return ServiceForm.parse(
        title=title,
        description=description,
        price=price,
        website_url=website_url,
        da=da,
        dr=dr,
        traffic=traffic,
    )


@router.get("/seller-dashboard")
def seller_dashboard(request: Request):
    seller = deps.user_with_role(request, Role.SELLER)
    if not seller:
        return deps.redirect_to_login()
    if not seller.is_approved:
        return {"user": seller.to_dict(), "pending_approval": True, "notice": SELLER_PENDING_NOTICE}
    listings = deps.catalog_service(request).seller_services(seller)
    orders = deps.order_service(request).seller_orders(seller)
    return {
        "user": seller.to_dict(),
        "pending_approval": False,
        "stats": stats.seller_stats(listings, orders),
        "services": [s.to_dict() for s in listings],
        "orders": [o.to_dict() for o in orders],
    }


@router.post("/seller-dashboard/services")
def create_service(
    request: Request,
    title: str = Form(""),
    description: str = Form(""),
    price: str = Form(""),
    website_url: str = Form(""),
    da: str = Form(""),
    dr: str = Form(""),
    traffic: str = Form(""),
):
    seller, stop = _active_seller(request)
    if stop:
        return stop
    try:
        form = _service_form(title, description, price, website_url, da, dr, traffic)
    except ValidationError as exc:
        return deps.error(exc.message, 400)
    service = deps.catalog_service(request).create_service(seller, form)
    return {"notice": SERVICE_CREATED_NOTICE, "service": service.to_dict()}


@router.post("/seller-dashboard/services/{service_id}")
def update_service(
    service_id: str,
    request: Request,
    title: str = Form(""),
    description: str = Form(""),
    price: str = Form(""),
    website_url: str = Form(""),
    da: str = Form(""),
    dr: str = Form(""),
    traffic: str = Form(""),
):
    seller, stop = _active_seller(request)
    if stop:
        return stop
    try:
        form = _service_form(title, description, price, website_url, da, dr, traffic)
        service = deps.catalog_service(request).update_service(seller, service_id, form)
    except ValidationError as exc:
        return deps.error(exc.message, 400)
    except ServiceNotFoundError:
        raise HTTPException(404, "Service not found")
    except ServiceAccessError as exc:
        return deps.error(str(exc), 403)
    return {"notice": SERVICE_UPDATED_NOTICE, "service": service.to_dict()}


@router.post("/seller-dashboard/services/{service_id}/delete")
def delete_own_service(service_id: str, request: Request):
    seller, stop = _active_seller(request)
    if stop:
        return stop
    try:
        deps.catalog_service(request).delete_service(seller, service_id)
    except ServiceNotFoundError:
        raise HTTPException(404, "Service not found")
    except ServiceAccessError as exc:
        return deps.error(str(exc), 403)
    return RedirectResponse(SELLER_DASHBOARD, status_code=303)


@router.post("/seller-dashboard/orders/{order_id}/status")
def change_order_status(order_id: str, request: Request, status: str = Form("")):
    seller, stop = _active_seller(request)
    if stop:
        return stop
    try:
        order = deps.order_service(request).change_status(seller, order_id, status)
    except OrderRejectedError as exc:
        return deps.error(exc.message, 400)
    except OrderNotFoundError:
        raise HTTPException(404, "Order not found")
    except OrderAccessError as exc:
        return deps.error(str(exc), 403)
    except InvalidTransitionError as exc:
        return deps.error(str(exc), 409)
    return {"order": order.to_dict()}


# ------------------------------------------------ admin ------------------------------------------------
def _approved_flag(value: str) -> bool:
    return (value or "").strip().lower() in {"1", "true", "yes", "on", "approve", "approved"}


@router.get("/admin-dashboard")
def admin_dashboard(request: Request, search: str = "", status: str = catalog.STATUS_ALL):
    admin = deps.user_with_role(request, Role.ADMIN)
    if not admin:
        return deps.redirect_to_login()
    board = deps.admin_service(request).dashboard(admin, search.strip(), status)
    return {
        "user": admin.to_dict(),
        "stats": board.stats,
        "users": [u.to_dict() for u in board.users],
        "services": [s.to_dict() for s in board.services],
        "orders": [o.to_dict() for o in board.orders],
    }


@router.post("/admin-dashboard/users/{user_id}/approval")
def user_approval(user_id: str, request: Request, approved: str = Form("")):
    admin = deps.user_with_role(request, Role.ADMIN)
    if not admin:
        return deps.redirect_to_login(after_post=True)
    try:
        notice = deps.admin_service(request).set_seller_approval(admin, user_id, _approved_flag(approved))
    except TargetNotFoundError:
        raise HTTPException(404, "User not found")
    except TargetRoleError as exc:
        return deps.error(exc.message, 400)
    return {"notice": notice}


@router.post("/admin-dashboard/users/{user_id}/delete")
def delete_user(user_id: str, request: Request):
    admin = deps.user_with_role(request, Role.ADMIN)
    if not admin:
        return deps.redirect_to_login(after_post=True)
    try:
        notice = deps.admin_service(request).delete_user(admin, user_id)
    except TargetNotFoundError:
        raise HTTPException(404, "User not found")
    except TargetRoleError as exc:
        return deps.error(exc.message, 400)
    return {"notice": notice}


@router.post("/admin-dashboard/services/{service_id}/approval")
def service_approval(service_id: str, request: Request, approved: str = Form("")):
    admin = deps.user_with_role(request, Role.ADMIN)
    if not admin:
        return deps.redirect_to_login(after_post=True)
    try:
        notice = deps.admin_service(request).set_service_approval(admin, service_id, _approved_flag(approved))
    except TargetNotFoundError:
        raise HTTPException(404, "Service not found")
    return {"notice": notice}


@router.post("/admin-dashboard/services/{service_id}/delete")
def delete_service(service_id: str, request: Request):
    admin = deps.user_with_role(request, Role.ADMIN)
    if not admin:
        return deps.redirect_to_login(after_post=True)
    try:
        notice = deps.admin_service(request).delete_service(admin, service_id)
    except TargetNotFoundError:
        raise HTTPException(404, "Service not found")
    return {"notice": notice}
