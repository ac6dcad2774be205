"""API routes."""

from keyforge.api.catalog import router as catalog_router
from keyforge.api.jose import router as jose_router
from keyforge.api.keys import router as keys_router

__all__ = [
    "catalog_router",
    "jose_router",
    "keys_router",
]
