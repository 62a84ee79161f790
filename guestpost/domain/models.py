"""
Entities of the marketplace as stored in the JSON collections.

Field names on disk keep the camelCase layout of the stored documents
(``firstName``, ``isApproved``...); ``to_dict``/``from_dict`` translate.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Mapping


class Role(str, Enum):
    BUYER = "buyer"
    SELLER = "seller"
    ADMIN = "admin"


class OrderStatus(str, Enum):
    PENDING = "pending"
    ACCEPTED = "accepted"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


def _int(value: Any, default: int = 0) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


@dataclass
class User:
    id: str
    first_name: str
    last_name: str
    email: str
    phone: str = ""
    country: str = ""
    city: str = ""
    role: Role = Role.BUYER
    is_approved: bool = False

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "firstName": self.first_name,
            "lastName": self.last_name,
            "email": self.email,
            "phone": self.phone,
            "country": self.country,
            "city": self.city,
            "role": self.role.value,
            "isApproved": self.is_approved,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "User":
        return cls(
            id=str(data.get("id", "")),
            first_name=data.get("firstName", "") or "",
            last_name=data.get("lastName", "") or "",
            email=data.get("email", "") or "",
            phone=data.get("phone", "") or "",
            country=data.get("country", "") or "",
            city=data.get("city", "") or "",
            role=Role(data.get("role", Role.BUYER.value)),
            is_approved=bool(data.get("isApproved", False)),
        )


@dataclass(frozen=True)
class SellerSnapshot:
    """
    Seller contact copied into a listing when it is created.

    Not refreshed if the seller later edits their profile.
    """

    seller_id: str
    name: str
    phone: str

    @classmethod
    def of(cls, seller: User) -> "SellerSnapshot":
        return cls(seller_id=seller.id, name=seller.full_name, phone=seller.phone)


@dataclass(frozen=True)
class ServiceSnapshot:
    """
    Listing details captured when an order is placed.

    Later edits to the service never change historical orders.
    """

    title: str
    price: int
    seller_name: str
    seller_phone: str

    def to_dict(self) -> dict:
        return {
            "title": self.title,
            "price": self.price,
            "sellerName": self.seller_name,
            "sellerPhone": self.seller_phone,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any] | None) -> "ServiceSnapshot":
        data = data or {}
        return cls(
            title=data.get("title", "") or "",
            price=_int(data.get("price")),
            seller_name=data.get("sellerName", "") or "",
            seller_phone=data.get("sellerPhone", "") or "",
        )


@dataclass
class Service:
    id: str
    title: str
    description: str
    price: int
    website_url: str
    da: int
    dr: int
    traffic: str
    seller: SellerSnapshot
    is_approved: bool = False

    @property
    def seller_id(self) -> str:
        return self.seller.seller_id

    def snapshot(self) -> ServiceSnapshot:
        return ServiceSnapshot(
            title=self.title,
            price=self.price,
            seller_name=self.seller.name,
            seller_phone=self.seller.phone,
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "price": self.price,
            "websiteUrl": self.website_url,
            "da": self.da,
            "dr": self.dr,
            "traffic": self.traffic,
            "sellerId": self.seller.seller_id,
            "sellerName": self.seller.name,
            "sellerPhone": self.seller.phone,
            "isApproved": self.is_approved,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Service":
        return cls(
            id=str(data.get("id", "")),
            title=data.get("title", "") or "",
            description=data.get("description", "") or "",
            price=_int(data.get("price")),
            website_url=data.get("websiteUrl", "") or "",
            da=_int(data.get("da")),
            dr=_int(data.get("dr")),
            traffic=str(data.get("traffic", "") or ""),
            seller=SellerSnapshot(
                seller_id=str(data.get("sellerId", "")),
                name=data.get("sellerName", "") or "",
                phone=data.get("sellerPhone", "") or "",
            ),
            is_approved=bool(data.get("isApproved", False)),
        )


@dataclass
class Order:
    id: str
    service_id: str
    buyer_id: str
    seller_id: str
    status: OrderStatus
    message: str
    created_at: str
    service: ServiceSnapshot = field(default_factory=lambda: ServiceSnapshot("", 0, "", ""))

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "serviceId": self.service_id,
            "buyerId": self.buyer_id,
            "sellerId": self.seller_id,
            "status": self.status.value,
            "message": self.message,
            "createdAt": self.created_at,
            "service": self.service.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Order":
        return cls(
            id=str(data.get("id", "")),
            service_id=str(data.get("serviceId", "")),
            buyer_id=str(data.get("buyerId", "")),
            seller_id=str(data.get("sellerId", "")),
            status=OrderStatus(data.get("status", OrderStatus.PENDING.value)),
            message=data.get("message", "") or "",
            created_at=data.get("createdAt", "") or "",
            service=ServiceSnapshot.from_dict(data.get("service")),
        )
