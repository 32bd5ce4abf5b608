# =============================================================================
# app/routers/products.py - Product Endpoints
# =============================================================================
# Mounted at /api/products.
# Reads are open to any authenticated user; creation records the caller
# as the product's manufacturer.
# =============================================================================

import logging
from typing import Annotated, Any
from uuid import UUID

from fastapi import APIRouter, Depends, Path, Query, status

from app.auth import AuthUser, get_current_user
from app.dependencies import ParsedBody, SupabaseDep
from app.exceptions import MissingFieldError, RecordNotFoundError

logger = logging.getLogger(__name__)

router = APIRouter()

REQUIRED_FIELDS = ("name",)


@router.get("")
async def list_products(
    db: SupabaseDep,
    user: AuthUser = Depends(get_current_user),
    category: Annotated[str | None, Query(description="Only products in this category")] = None,
    limit: Annotated[int, Query(ge=1, le=500)] = 100,
) -> list[dict[str, Any]]:
    """List products, newest first."""
    filters = {"category": category} if category else None
    return db.fetch_all("products", filters=filters, limit=limit)


@router.get("/{product_id}")
async def get_product(
    product_id: Annotated[UUID, Path(description="Product UUID")],
    db: SupabaseDep,
    user: AuthUser = Depends(get_current_user),
) -> dict[str, Any]:
    """Get one product by ID."""
    row = db.fetch_one("products", product_id)
    if row is None:
        raise RecordNotFoundError("Product", str(product_id))
    return row


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_product(
    body: ParsedBody,
    db: SupabaseDep,
    user: AuthUser = Depends(get_current_user),
) -> dict[str, Any]:
    """
    Create a product.

    Accepts JSON or a form; nested form keys such as
    `details[origin]=Kenya` become nested objects.
    """
    for field in REQUIRED_FIELDS:
        if not body.get(field):
            raise MissingFieldError(field)

    data = {**body, "manufacturer_id": str(user.id)}
    product = db.insert_one("products", data)
    logger.info(f"Product {product.get('id')} created by {user.id}")
    return product
