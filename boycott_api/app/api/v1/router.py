"""
Top‑level router for version 1 of the API.

This router aggregates the domain routers.  ``main.create_app``
mounts it under ``settings.api_prefix``, which is empty by default so
existing clients keep calling ``/products`` and friends directly.
"""

from fastapi import APIRouter

from .endpoints import myqueries, products, recommendations, root

router = APIRouter()

router.include_router(root.router, tags=["health"])
router.include_router(products.router, prefix="/products", tags=["products"])
router.include_router(recommendations.router, prefix="/recommendations", tags=["recommendations"])
router.include_router(myqueries.router, prefix="/myqueries", tags=["myqueries"])
