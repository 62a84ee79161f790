"""
Catalog queries: search, range filters and sorting over listings, plus the
admin-side search/status filters for users and services.

All helpers are pure; they take already-loaded collections and return new
lists without touching storage.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, Iterable, List, Optional

from .models import Role, Service, User

FEATURED_LIMIT = 6

SORT_NEWEST = "newest"
SORT_PRICE_LOW = "price-low"
SORT_PRICE_HIGH = "price-high"
SORT_DA_HIGH = "da-high"
SORT_DR_HIGH = "dr-high"

# (key, reverse); sorted() is stable, so ties keep collection order.
_SORTS: Dict[str, tuple[Callable[[Service], int], bool]] = {
    SORT_PRICE_LOW: (lambda s: s.price, False),
    SORT_PRICE_HIGH: (lambda s: s.price, True),
    SORT_DA_HIGH: (lambda s: s.da, True),
    SORT_DR_HIGH: (lambda s: s.dr, True),
}
SORT_MODES = (SORT_NEWEST, *_SORTS)

STATUS_ALL = "all"
STATUS_PENDING = "pending"
STATUS_APPROVED = "approved"


@dataclass(frozen=True)
class Range:
    """Inclusive bounds; ``None`` leaves that side unconstrained."""

    min: Optional[int] = None
    max: Optional[int] = None

    def contains(self, value: int) -> bool:
        if self.min is not None and value < self.min:
            return False
        if self.max is not None and value > self.max:
            return False
        return True


@dataclass(frozen=True)
class ServiceQuery:
    search: str = ""
    price: Range = Range()
    da: Range = Range()
    dr: Range = Range()
    sort: str = SORT_NEWEST


def _contains(haystack: str, needle: str) -> bool:
    return needle.lower() in (haystack or "").lower()


def approved_only(services: Iterable[Service]) -> List[Service]:
    return [s for s in services if s.is_approved]


def featured(services: Iterable[Service], limit: int = FEATURED_LIMIT) -> List[Service]:
    return approved_only(services)[:limit]


def matches_search(service: Service, query: str) -> bool:
    if not query:
        return True
    return (
        _contains(service.title, query)
        or _contains(service.description, query)
        or _contains(service.website_url, query)
    )


def sort_services(services: Iterable[Service], mode: str) -> List[Service]:
    items = list(services)
    if mode not in _SORTS:
        return items
    key, reverse = _SORTS[mode]
    return sorted(items, key=key, reverse=reverse)


def search_services(services: Iterable[Service], query: ServiceQuery) -> List[Service]:
    """Apply search, the three range filters and the sort mode, in that order."""
    filtered = [
        s
        for s in services
        if matches_search(s, query.search)
        and query.price.contains(s.price)
        and query.da.contains(s.da)
        and query.dr.contains(s.dr)
    ]
    return sort_services(filtered, query.sort)


def _matches_status(is_approved: bool, status: str) -> bool:
    if status == STATUS_PENDING:
        return not is_approved
    if status == STATUS_APPROVED:
        return is_approved
    return True


def filter_users_for_admin(users: Iterable[User], search: str = "", status: str = STATUS_ALL) -> List[User]:
    """Non-admin users matching name/email search and approval status."""
    result = []
    for user in users:
        if user.role is Role.ADMIN:
            continue
        if search and not (
            _contains(user.first_name, search) or _contains(user.last_name, search) or _contains(user.email, search)
        ):
            continue
        if _matches_status(user.is_approved, status):
            result.append(user)
    return result


def filter_services_for_admin(services: Iterable[Service], search: str = "", status: str = STATUS_ALL) -> List[Service]:
    result = []
    for service in services:
        if search and not (
            _contains(service.title, search)
            or _contains(service.website_url, search)
            or _contains(service.seller.name, search)
        ):
            continue
        if _matches_status(service.is_approved, status):
            result.append(service)
    return result
