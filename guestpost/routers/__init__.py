"""
FastAPI routers grouped by page (catalog, auth, dashboards).

Each module exposes an APIRouter included by ``guestpost.app.create_app``.
Use-case services are read from ``request.app.state``.
"""
