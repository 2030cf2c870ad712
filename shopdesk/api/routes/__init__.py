"""API routes."""

from shopdesk.api.routes.dashboard import router as dashboard_router
from shopdesk.api.routes.health import router as health_router
from shopdesk.api.routes.products import router as products_router
from shopdesk.api.routes.sales import router as sales_router
from shopdesk.api.routes.verify import router as verify_router

__all__ = [
    "dashboard_router",
    "health_router",
    "products_router",
    "sales_router",
    "verify_router",
]
