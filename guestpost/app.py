"""FastAPI application wiring: storage, use-case services and routers."""
from __future__ import annotations

import logging
from typing import Optional

from fastapi import FastAPI

from guestpost.core.config import get_settings
from guestpost.core.logging_config import setup_logging
from guestpost.repositories.kv_store import KeyValueStore, build_store
from guestpost.repositories.market_repository import MarketRepository
from guestpost.routers import auth as auth_router
from guestpost.routers import dashboards as dashboards_router
from guestpost.routers import pages as pages_router
from guestpost.services.admin_service import AdminService
from guestpost.services.auth_service import AuthService
from guestpost.services.catalog_service import CatalogService
from guestpost.services.order_service import OrderService

logger = logging.getLogger(__name__)


def create_app(store: Optional[KeyValueStore] = None) -> FastAPI:
    """
    Build the application around ``store`` (defaults to the backend chosen by
    ``STORAGE_BACKEND``) and seed the administrator account if missing.
    """
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_file or None)

    repository = MarketRepository(store if store is not None else build_store(settings))
    auth_service = AuthService(repository)
    auth_service.ensure_default_admin()

    app = FastAPI(title="GuestPost Marketplace")
    app.state.repository = repository
    app.state.auth_service = auth_service
    app.state.catalog_service = CatalogService(repository)
    app.state.order_service = OrderService(repository)
    app.state.admin_service = AdminService(repository)

    app.include_router(auth_router.router)
    app.include_router(dashboards_router.router)
    app.include_router(pages_router.router)
    logger.info("Marketplace app ready (env=%s, storage=%s)", settings.app_env, type(repository.storage.store).__name__)
    return app
