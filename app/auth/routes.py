# =============================================================================
# app/auth/routes.py - Authentication Routes
# =============================================================================
# Mounted at /api/auth.
#
# Sign-up and login happen against Supabase Auth directly; these routes
# only describe the caller behind a token.
# =============================================================================

import logging

from fastapi import APIRouter, Depends

from app.auth.dependencies import get_current_user
from app.auth.models import AuthUser, TokenVerification, UserResponse
from app.dependencies import SupabaseDep
from lib.supabase_client import SupabaseClientError

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/me", response_model=UserResponse)
async def get_current_user_info(
    db: SupabaseDep,
    user: AuthUser = Depends(get_current_user),
) -> UserResponse:
    """
    Get the current authenticated user's profile.

    Falls back to the token claims when the users table has no row yet.
    """
    try:
        row = db.fetch_one("users", user.id)
    except SupabaseClientError as e:
        logger.warning(f"Could not fetch user profile: {e}")
        row = None

    if row:
        return UserResponse(**row)

    return UserResponse(id=user.id, email=user.email, role=user.role)


@router.get("/verify", response_model=TokenVerification)
async def verify_token(
    user: AuthUser = Depends(get_current_user)
) -> TokenVerification:
    """Confirm that the bearer token is valid."""
    return TokenVerification(valid=True, user_id=str(user.id), email=user.email)
