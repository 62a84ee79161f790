from __future__ import annotations

from fastapi import APIRouter, Form, Request
from fastapi.responses import RedirectResponse

from guestpost.routers import deps
from guestpost.services.auth_service import (
    REGISTRABLE_ROLES,
    AccountExistsError,
    InvalidCredentialsError,
    RegistrationError,
    SellerPendingApprovalError,
)
from guestpost.services.permissions import dashboard_path

router = APIRouter(prefix="", tags=["auth"])


@router.get("/login")
def login_page(request: Request):
    user = deps.current_user(request)
    return {"user": user.to_dict() if user else None, "dashboard": dashboard_path(user)}


@router.post("/login")
def login(request: Request, email: str = Form(""), password: str = Form("")):
    svc = deps.auth_service(request)
    try:
        result = svc.login(email, password)
    except SellerPendingApprovalError as exc:
        return deps.error(exc.message, 403)
    except InvalidCredentialsError:
        return deps.error("Invalid email or password", 401)
    return RedirectResponse(result.redirect_to, status_code=303)


@router.get("/register")
def register_page():
    return {"roles": [role.value for role in REGISTRABLE_ROLES]}


@router.post("/register")
def register(
    request: Request,
    first_name: str = Form(""),
    last_name: str = Form(""),
    email: str = Form(""),
    phone: str = Form(""),
    country: str = Form(""),
    city: str = Form(""),
    role: str = Form("buyer"),
    password: str = Form(""),
    confirm_password: str = Form(""),
):
    svc = deps.auth_service(request)
    try:
        result = svc.register(
            first_name=first_name,
            last_name=last_name,
            email=email,
            phone=phone,
            country=country,
            city=city,
            role=role,
            password=password,
            confirm_password=confirm_password,
        )
    except RegistrationError as exc:
        return deps.error(exc.message, 400)
    except AccountExistsError as exc:
        return deps.error(str(exc), 409)
    if result.notice:
        return {"notice": result.notice, "redirect": result.redirect_to}
    return RedirectResponse(result.redirect_to, status_code=303)


@router.post("/logout")
def logout(request: Request):
    deps.auth_service(request).logout()
    return RedirectResponse("/", status_code=303)
