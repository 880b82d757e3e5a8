"""
Product endpoints for API v1.

CRUD over the products collection plus a maintenance route that
recomputes every product's ``recommendationCount``.  Ids are taken as
strings from the path and validated by the service, so a malformed id
yields 400 rather than a 404 or a storage fault.
"""

from typing import Any, Dict, List

from fastapi import APIRouter

from boycott_api.app.schemas.product import ProductCreate, ProductUpdate
from boycott_api.app.schemas.results import DeleteResult, InsertResult, UpdateResult
from boycott_api.app.services.product_service import ProductService

router = APIRouter()


@router.get("", response_model=List[Dict[str, Any]])
async def list_products() -> List[Dict[str, Any]]:
    """Return all products."""
    return await ProductService.list_products()


@router.post("", response_model=InsertResult)
async def create_product(product_in: ProductCreate) -> InsertResult:
    """Create a product.  ``userEmail`` is required."""
    return await ProductService.create_product(product_in)


@router.post("/reconcile", response_model=UpdateResult)
async def reconcile_counts() -> UpdateResult:
    """Recompute ``recommendationCount`` for every product from its recommendations."""
    return await ProductService.reconcile_counts()


@router.get("/{product_id}", response_model=Dict[str, Any])
async def get_product(product_id: str) -> Dict[str, Any]:
    """Retrieve a single product.  404 if it does not exist."""
    return await ProductService.get_product(product_id)


@router.put("/{product_id}", response_model=UpdateResult)
async def update_product(product_id: str, product_in: ProductUpdate) -> UpdateResult:
    """Merge fields into a product, creating it under ``product_id`` if absent."""
    return await ProductService.update_product(product_id, product_in)


@router.delete("/{product_id}", response_model=DeleteResult)
async def delete_product(product_id: str) -> DeleteResult:
    """Delete a product.  Its recommendations are kept."""
    return await ProductService.delete_product(product_id)
