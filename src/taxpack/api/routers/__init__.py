"""API routers package."""

from taxpack.api.routers.properties import router as properties_router
from taxpack.api.routers.transactions import router as transactions_router
from taxpack.api.routers.exports import router as exports_router

__all__ = [
    "properties_router",
    "transactions_router",
    "exports_router",
]
