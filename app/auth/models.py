# =============================================================================
# app/auth/models.py - Authentication Models
# =============================================================================
# Pydantic models for authentication data.
# =============================================================================

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict


class AuthUser(BaseModel):
    """
    Caller identity taken from a verified access token.

    Only what the token itself carries; no database lookup.
    """
    model_config = ConfigDict(frozen=True)

    id: UUID
    email: Optional[str] = None
    role: Optional[str] = None


class UserResponse(BaseModel):
    """Profile returned by /api/auth/me and /api/users."""
    id: UUID
    email: Optional[str] = None
    name: Optional[str] = None
    role: Optional[str] = None
    organization: Optional[str] = None
    created_at: Optional[datetime] = None


class TokenVerification(BaseModel):
    """Result of /api/auth/verify."""
    valid: bool
    user_id: str
    email: Optional[str] = None
