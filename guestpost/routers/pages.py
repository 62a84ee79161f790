from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Form, HTTPException, Request
from fastapi.responses import RedirectResponse

from guestpost.domain import catalog, stats
from guestpost.routers import deps
from guestpost.services.catalog_service import ServiceNotFoundError
from guestpost.services.order_service import ORDER_PLACED_NOTICE, OrderRejectedError
from guestpost.services.permissions import AuthenticationRequiredError, AuthorizationError, dashboard_path

router = APIRouter(prefix="", tags=["pages"])


def _bound(name: str, raw: Optional[str]) -> Optional[int]:
    """Blank filter inputs mean "no bound"."""
    value = (raw or "").strip()
    if not value:
        return None
    try:
        return int(value)
    except ValueError:
        raise HTTPException(400, f"{name} must be a whole number")


def _nav(request: Request) -> dict:
    user = deps.current_user(request)
    return {
        "user": user.to_dict() if user else None,
        "dashboard": dashboard_path(user),
    }


@router.get("/")
def home(request: Request):
    repo = deps.repository(request)
    featured = deps.catalog_service(request).featured_services()
    return {
        "nav": _nav(request),
        "stats": stats.home_stats(repo.list_users(), repo.list_services(), repo.list_orders()),
        "featured": [s.to_dict() for s in featured],
    }


@router.get("/services")
def services(
    request: Request,
    search: str = "",
    min_price: str = "",
    max_price: str = "",
    min_da: str = "",
    max_da: str = "",
    min_dr: str = "",
    max_dr: str = "",
    sort: str = catalog.SORT_NEWEST,
):
    query = catalog.ServiceQuery(
        search=search.strip(),
        price=catalog.Range(_bound("min_price", min_price), _bound("max_price", max_price)),
        da=catalog.Range(_bound("min_da", min_da), _bound("max_da", max_da)),
        dr=catalog.Range(_bound("min_dr", min_dr), _bound("max_dr", max_dr)),
        sort=sort,
    )
    svc = deps.catalog_service(request)
    found = svc.public_services(query)
    return {
        "nav": _nav(request),
        "sort_modes": list(catalog.SORT_MODES),
        "count": len(found),
        "total": len(svc.public_services()),
        "services": [s.to_dict() for s in found],
    }


@router.get("/service/{service_id}")
def service_details(service_id: str, request: Request):
    try:
        service = deps.catalog_service(request).get_public_service(service_id)
    except ServiceNotFoundError:
        return RedirectResponse("/services", status_code=302)
    return {"nav": _nav(request), "service": service.to_dict()}


@router.post("/service/{service_id}/order")
def place_order(service_id: str, request: Request, message: str = Form("")):
    user = deps.current_user(request)
    try:
        order = deps.order_service(request).place_order(user, service_id, message)
    except AuthenticationRequiredError:
        return deps.redirect_to_login(after_post=True)
    except AuthorizationError as exc:
        return deps.error(exc.message, 403)
    except OrderRejectedError as exc:
        return deps.error(exc.message, 400)
    except ServiceNotFoundError:
        raise HTTPException(404, "Service not found")
    return {"notice": ORDER_PLACED_NOTICE, "order": order.to_dict(), "redirect": "/buyer-dashboard"}
