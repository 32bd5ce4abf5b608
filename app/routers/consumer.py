# =============================================================================
# app/routers/consumer.py - Consumer Endpoints
# =============================================================================
# Mounted at /api/consumer. Public, no authentication: a consumer scans a
# batch code and sees where the product came from.
# =============================================================================

from typing import Annotated, Any
from uuid import UUID

from fastapi import APIRouter, Path

from app.dependencies import SupabaseDep
from app.exceptions import RecordNotFoundError

router = APIRouter()


@router.get("/trace/{batch_id}")
async def trace_batch(
    batch_id: Annotated[UUID, Path(description="Batch UUID printed on the package")],
    db: SupabaseDep,
) -> dict[str, Any]:
    """Return a batch together with the product it belongs to."""
    batch = db.fetch_one("batches", batch_id)
    if batch is None:
        raise RecordNotFoundError("Batch", str(batch_id))

    product = None
    if batch.get("product_id"):
        product = db.fetch_one("products", batch["product_id"])

    return {"batch": batch, "product": product}
