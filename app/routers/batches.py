# =============================================================================
# app/routers/batches.py - Batch Endpoints
# =============================================================================
# Mounted at /api/batches.
# A batch is one produced lot of a product; it always references an
# existing product.
# =============================================================================

import logging
from typing import Annotated, Any
from uuid import UUID

from fastapi import APIRouter, Depends, Path, Query, status

from app.auth import AuthUser, get_current_user
from app.dependencies import ParsedBody, SupabaseDep
from app.exceptions import InvalidFieldError, MissingFieldError, RecordNotFoundError

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("")
async def list_batches(
    db: SupabaseDep,
    user: AuthUser = Depends(get_current_user),
    product_id: Annotated[UUID | None, Query(description="Only batches of this product")] = None,
    limit: Annotated[int, Query(ge=1, le=500)] = 100,
) -> list[dict[str, Any]]:
    """List batches, newest first."""
    filters = {"product_id": product_id} if product_id else None
    return db.fetch_all("batches", filters=filters, limit=limit)


@router.get("/{batch_id}")
async def get_batch(
    batch_id: Annotated[UUID, Path(description="Batch UUID")],
    db: SupabaseDep,
    user: AuthUser = Depends(get_current_user),
) -> dict[str, Any]:
    """Get one batch by ID."""
    row = db.fetch_one("batches", batch_id)
    if row is None:
        raise RecordNotFoundError("Batch", str(batch_id))
    return row


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_batch(
    body: ParsedBody,
    db: SupabaseDep,
    user: AuthUser = Depends(get_current_user),
) -> dict[str, Any]:
    """Create a batch for an existing product."""
    product_id = body.get("product_id")
    if not product_id:
        raise MissingFieldError("product_id")
    try:
        product_id = UUID(str(product_id))
    except ValueError:
        raise InvalidFieldError("product_id", "a UUID")

    if db.fetch_one("products", product_id) is None:
        raise RecordNotFoundError("Product", str(product_id))

    batch = db.insert_one(
        "batches", {**body, "product_id": str(product_id), "created_by": str(user.id)}
    )
    logger.info(f"Batch {batch.get('id')} created for product {product_id}")
    return batch
