from __future__ import annotations

import sys
from pathlib import Path

import pytest

# Make the guestpost package importable when running tests from a checkout
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from guestpost.core import config as core_config  # noqa: E402
from guestpost.core.utils import new_id  # noqa: E402
from guestpost.domain.models import Role, SellerSnapshot, Service, User  # noqa: E402
from guestpost.repositories.kv_store import MemoryStore  # noqa: E402
from guestpost.repositories.market_repository import MarketRepository  # noqa: E402

_ENV_KEYS = (
    "APP_ENV",
    "STORAGE_BACKEND",
    "DATA_FILE",
    "DATABASE_URL",
    "ADMIN_EMAIL",
    "ADMIN_PASSWORD",
    "MIN_PASSWORD_LENGTH",
    "PASSWORD_HASHING",
    "LOG_LEVEL",
    "LOG_FILE",
)


@pytest.fixture(autouse=True)
def clean_settings(monkeypatch):
    """Each test starts from default settings and an empty settings cache."""
    for key in _ENV_KEYS:
        monkeypatch.delenv(key, raising=False)
    core_config.get_settings.cache_clear()
    yield
    core_config.get_settings.cache_clear()


@pytest.fixture()
def repo() -> MarketRepository:
    return MarketRepository(MemoryStore())


@pytest.fixture()
def make_user(repo):
    """Factory that stores a user directly (bypassing registration rules)."""

    def _make(role: str = "buyer", approved: bool = True, first_name: str = "Test", last_name: str = "User", email: str | None = None):
        uid = new_id()
        user = User(
            id=uid,
            first_name=first_name,
            last_name=last_name,
            email=email or f"{role}-{uid}@example.com",
            phone="+10000000000",
            country="Portugal",
            city="Lisbon",
            role=Role(role),
            is_approved=approved,
        )
        repo.add_user(user)
        repo.set_password(user.email, "secret1")
        return user

    return _make


@pytest.fixture()
def make_service(repo):
    """Factory that stores a listing owned by ``seller``."""

    def _make(seller, *, title: str = "Tech blog post", price: int = 100, da: int = 40, dr: int = 40, approved: bool = True, **fields):
        service = Service(
            id=new_id(),
            title=title,
            description=fields.get("description", "Dofollow article on a tech blog"),
            price=price,
            website_url=fields.get("website_url", "https://techblog.example"),
            da=da,
            dr=dr,
            traffic=fields.get("traffic", "10K"),
            seller=SellerSnapshot.of(seller),
            is_approved=approved,
        )
        repo.add_service(service)
        return service

    return _make
