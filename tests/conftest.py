# =============================================================================
# tests/conftest.py - Pytest Configuration
# =============================================================================
# This module provides pytest fixtures and configuration for all tests.
#
# Key features:
# - Sets up mock environment variables before any imports
# - In-memory stand-in for the database connector
# - TestClient with the startup handshake patched out
# =============================================================================

import os
import uuid
from typing import Any
from unittest.mock import patch

# =============================================================================
# Set up test environment BEFORE any imports
# =============================================================================
# This must happen before importing app.config which loads settings immediately

os.environ.setdefault("SUPABASE_URL", "https://test-project.supabase.co")
os.environ.setdefault("SUPABASE_SERVICE_KEY", "test-service-key")
os.environ.setdefault("SUPABASE_JWT_SECRET", "test-jwt-secret-for-the-test-suite")
os.environ.setdefault("NODE_ENV", "test")

import pytest
from fastapi.testclient import TestClient
from jose import jwt

from app.auth import AuthUser, get_current_user
from app.config import settings
from app.dependencies import get_supabase_client
from app.main import app
from lib.supabase_client import SupabaseClient, SupabaseClientError

TEST_USER_ID = uuid.UUID("6f1c2a52-3c1e-4c52-9d0e-8f3b2e7a9b10")


# =============================================================================
# Fake Database
# =============================================================================

class FakeDatabase:
    """Dict-backed replacement for SupabaseClient's table helpers."""

    def __init__(self) -> None:
        self.tables: dict[str, dict[str, dict[str, Any]]] = {
            "users": {},
            "products": {},
            "batches": {},
        }
        self.fail_with: Exception | None = None

    def add(self, table: str, row: dict[str, Any]) -> dict[str, Any]:
        row = {"id": str(uuid.uuid4()), **row}
        self.tables[table][str(row["id"])] = row
        return row

    def fetch_all(self, table, filters=None, limit=100):
        if self.fail_with:
            raise self.fail_with
        rows = list(self.tables[table].values())
        for column, value in (filters or {}).items():
            rows = [r for r in rows if str(r.get(column)) == str(value)]
        return rows[:limit]

    def fetch_one(self, table, record_id):
        if self.fail_with:
            raise self.fail_with
        try:
            uuid.UUID(str(record_id))
        except ValueError as e:
            # Postgres rejects the cast the same way (22P02)
            raise SupabaseClientError(
                message=f"Failed to fetch {table} record {record_id}: {e}",
                code="FETCH_FAILED",
            )
        return self.tables[table].get(str(record_id))

    def insert_one(self, table, data):
        if self.fail_with:
            raise self.fail_with
        return self.add(table, data)


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def fake_db():
    """Empty in-memory database wired into the app."""
    db = FakeDatabase()
    app.dependency_overrides[get_supabase_client] = lambda: db
    yield db
    app.dependency_overrides.pop(get_supabase_client, None)


@pytest.fixture
def client(fake_db):
    """TestClient with the lifespan running and no real database."""
    with patch.object(SupabaseClient, "connect") as connect:
        with TestClient(app, raise_server_exceptions=False) as test_client:
            yield test_client
        connect.assert_called_once()


@pytest.fixture
def auth_user():
    """Skip token verification and act as TEST_USER_ID."""
    user = AuthUser(id=TEST_USER_ID, email="grower@example.com", role="manufacturer")
    app.dependency_overrides[get_current_user] = lambda: user
    yield user
    app.dependency_overrides.pop(get_current_user, None)


def sign_token(sub: str = str(TEST_USER_ID), **claims) -> str:
    """Sign an access token the way Supabase Auth does."""
    payload = {"sub": sub, "aud": "authenticated", "email": "grower@example.com", **claims}
    return jwt.encode(payload, settings.SUPABASE_JWT_SECRET, algorithm="HS256")


@pytest.fixture
def make_token():
    """Factory for signed access tokens; claims override the defaults."""
    return sign_token
