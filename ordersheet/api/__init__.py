"""API layer module.

Contains FastAPI routers and request/response schemas.
"""

from ordersheet.api.admin import router as admin_router
from ordersheet.api.health import router as health_router
from ordersheet.api.products import router as products_router
from ordersheet.api.search import router as search_router
from ordersheet.api.selections import router as selections_router

__all__ = [
    "admin_router",
    "health_router",
    "products_router",
    "search_router",
    "selections_router",
]
