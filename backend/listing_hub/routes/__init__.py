"""
Route aggregation module.

Product routes are mounted under /products; health is mounted at root.
"""
from listing_hub.routes.health import router as health_router
from listing_hub.routes.products import router as products_router

__all__ = ["health_router", "products_router"]
