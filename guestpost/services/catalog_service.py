"""Listing use cases: public catalog and seller-side management."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional

from guestpost.core.utils import new_id
from guestpost.domain import catalog
from guestpost.domain.models import Role, SellerSnapshot, Service, User
from guestpost.repositories.market_repository import MarketRepository
from guestpost.services.permissions import AuthorizationError, require_role

logger = logging.getLogger(__name__)

SERVICE_CREATED_NOTICE = "Service created successfully! It will be reviewed by admin for approval."
SERVICE_UPDATED_NOTICE = "Service updated successfully! It will need admin approval again."
SELLER_PENDING_NOTICE = "Your seller account is pending approval."


class CatalogError(Exception):
    """Base exception for listing workflows."""


class ServiceNotFoundError(CatalogError):
    pass


class ServiceAccessError(CatalogError):
    """Raised when a seller acts on a listing owned by someone else."""


class ValidationError(CatalogError):
    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


def _parse_int(label: str, raw, *, minimum: int, maximum: Optional[int] = None) -> int:
    try:
        value = int(str(raw).strip())
    except (TypeError, ValueError):
        raise ValidationError(f"{label} must be a whole number") from None
    if value < minimum or (maximum is not None and value > maximum):
        bound = f"between {minimum} and {maximum}" if maximum is not None else f"at least {minimum}"
        raise ValidationError(f"{label} must be {bound}")
    return value


def _required(label: str, raw) -> str:
    value = (raw or "").strip()
    if not value:
        raise ValidationError(f"{label} is required")
    return value


@dataclass(frozen=True)
class ServiceForm:
    """Editable listing fields, already validated."""

    title: str
    description: str
    price: int
    website_url: str
    da: int
    dr: int
    traffic: str

    @classmethod
    def parse(cls, *, title, description, price, website_url, da, dr, traffic) -> "ServiceForm":
        """Validate raw form input (strings) the way the listing form does."""
        return cls(
            title=_required("Service title", title),
            description=_required("Description", description),
            price=_parse_int("Price", price, minimum=1),
            website_url=_required("Website URL", website_url),
            da=_parse_int("Domain Authority", da, minimum=1, maximum=100),
            dr=_parse_int("Domain Rating", dr, minimum=1, maximum=100),
            traffic=_required("Monthly traffic", traffic),
        )

    def apply_to(self, service: Service) -> None:
        service.title = self.title
        service.description = self.description
        service.price = self.price
        service.website_url = self.website_url
        service.da = self.da
        service.dr = self.dr
        service.traffic = self.traffic


@dataclass
class CatalogService:
    repository: MarketRepository

    # -------------------------- public --------------------------
    def public_services(self, query: catalog.ServiceQuery | None = None) -> List[Service]:
        approved = catalog.approved_only(self.repository.list_services())
        if query is None:
            return approved
        return catalog.search_services(approved, query)

    def featured_services(self) -> List[Service]:
        return catalog.featured(self.repository.list_services())

    def get_public_service(self, service_id: str) -> Service:
        service = self.repository.get_service(service_id)
        if not service or not service.is_approved:
            raise ServiceNotFoundError(f"Service {service_id} not found")
        return service

    # -------------------------- seller --------------------------
    def _require_active_seller(self, user: Optional[User]) -> User:
        seller = require_role(user, Role.SELLER, "Only sellers can manage services.")
        if not seller.is_approved:
            raise AuthorizationError(SELLER_PENDING_NOTICE)
        return seller

    def _owned(self, seller: User, service_id: str) -> Service:
        service = self.repository.get_service(service_id)
        if not service:
            raise ServiceNotFoundError(f"Service {service_id} not found")
        if service.seller_id != seller.id:
            raise ServiceAccessError("You can only manage your own services.")
        return service

    def seller_services(self, user: Optional[User]) -> List[Service]:
        seller = self._require_active_seller(user)
        return [s for s in self.repository.list_services() if s.seller_id == seller.id]

    def create_service(self, user: Optional[User], form: ServiceForm) -> Service:
        seller = self._require_active_seller(user)
        service = Service(
            id=new_id(),
            title=form.title,
            description=form.description,
            price=form.price,
            website_url=form.website_url,
            da=form.da,
            dr=form.dr,
            traffic=form.traffic,
            seller=SellerSnapshot.of(seller),
            is_approved=False,
        )
        self.repository.add_service(service)
        logger.info("Seller %s created service %s", seller.id, service.id)
        return service

    def update_service(self, user: Optional[User], service_id: str, form: ServiceForm) -> Service:
        """Replace the editable fields; any edit sends the listing back to review."""
        seller = self._require_active_seller(user)
        self._owned(seller, service_id)

        def _change(service: Service) -> None:
            form.apply_to(service)
            service.is_approved = False

        updated = self.repository.update_service(service_id, _change)
        if updated is None:
            raise ServiceNotFoundError(f"Service {service_id} not found")
        logger.info("Seller %s updated service %s, approval reset", seller.id, service_id)
        return updated

    def delete_service(self, user: Optional[User], service_id: str) -> None:
        seller = self._require_active_seller(user)
        self._owned(seller, service_id)
        self.repository.delete_service(service_id)
        logger.info("Seller %s deleted service %s", seller.id, service_id)
