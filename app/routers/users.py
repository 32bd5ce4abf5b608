# =============================================================================
# app/routers/users.py - User Endpoints
# =============================================================================
# Mounted at /api/users. Read-only views over the users table.
# All endpoints require authentication.
# =============================================================================

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Path, Query

from app.auth import AuthUser, UserResponse, get_current_user
from app.dependencies import SupabaseDep
from app.exceptions import RecordNotFoundError

router = APIRouter()


@router.get("", response_model=list[UserResponse])
async def list_users(
    db: SupabaseDep,
    user: AuthUser = Depends(get_current_user),
    role: Annotated[str | None, Query(description="Only users with this role")] = None,
    limit: Annotated[int, Query(ge=1, le=500)] = 100,
):
    """List users, newest first."""
    filters = {"role": role} if role else None
    return db.fetch_all("users", filters=filters, limit=limit)


@router.get("/{user_id}", response_model=UserResponse)
async def get_user(
    user_id: Annotated[UUID, Path(description="User UUID")],
    db: SupabaseDep,
    user: AuthUser = Depends(get_current_user),
):
    """Get one user by ID."""
    row = db.fetch_one("users", user_id)
    if row is None:
        raise RecordNotFoundError("User", str(user_id))
    return row
