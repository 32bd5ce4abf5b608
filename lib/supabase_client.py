# =============================================================================
# lib/supabase_client.py - Supabase Client Wrapper
# =============================================================================
# This module provides the persistent-store connector for the API.
# It implements the singleton pattern to reuse a single client connection
# and provides:
# - connect(): startup handshake, fatal if the store is unreachable
# - fetch_all / fetch_one / insert_one: thin table helpers for route groups
#
# Usage:
#   from lib.supabase_client import SupabaseClient
#   SupabaseClient.connect()
#   products = SupabaseClient.fetch_all("products")
# =============================================================================

from __future__ import annotations

import logging
from typing import Any
from uuid import UUID

from supabase import create_client, Client

from app.config import settings

# Set up logging for this module
logger = logging.getLogger(__name__)

# Table queried by the startup handshake
HANDSHAKE_TABLE = "users"


class SupabaseClientError(Exception):
    """Error during Supabase operations."""

    def __init__(
        self,
        message: str,
        code: str = "SUPABASE_ERROR",
        suggestion: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.code = code
        self.message = message
        self.suggestion = suggestion
        self.details = details or {}

    def __str__(self) -> str:
        result = f"[{self.code}] {self.message}"
        if self.suggestion:
            result += f" Suggestion: {self.suggestion}"
        return result


class DatabaseConnectionError(SupabaseClientError):
    """Raised when the store cannot be reached at startup."""

    def __init__(self, error: str):
        super().__init__(
            message=f"Could not connect to the database: {error}",
            code="DATABASE_UNAVAILABLE",
            suggestion="Check SUPABASE_URL and SUPABASE_SERVICE_KEY and that the project is running",
        )


class SupabaseClient:
    """
    Typed wrapper for Supabase database operations.

    Implements singleton pattern - one client instance is shared across
    the application. All methods are class methods for easy access without
    instantiation.
    """

    _instance: Client | None = None

    @classmethod
    def get_client(cls) -> Client:
        """
        Get or create the singleton Supabase client.

        Uses service_role key which bypasses Row Level Security (RLS).

        Raises:
            SupabaseClientError: If client creation fails
        """
        if cls._instance is None:
            try:
                cls._instance = create_client(
                    settings.SUPABASE_URL,
                    settings.SUPABASE_SERVICE_KEY
                )
                logger.info("Supabase client initialized successfully")
            except Exception as e:
                raise SupabaseClientError(
                    message=f"Failed to create Supabase client: {e}",
                    code="CLIENT_INIT_FAILED",
                    suggestion="Check SUPABASE_URL and SUPABASE_SERVICE_KEY in your .env file"
                )
        return cls._instance

    @classmethod
    def connect(cls) -> Client:
        """
        Create the client and prove the store answers a query.

        Called once during application startup, before the listener is
        bound. Any failure is fatal for the process.

        Raises:
            DatabaseConnectionError: If the client can't be created or the
                handshake query fails
        """
        try:
            client = cls.get_client()
            client.table(HANDSHAKE_TABLE).select("id").limit(1).execute()
        except Exception as e:
            cls._instance = None
            raise DatabaseConnectionError(str(e)) from e

        logger.info("Database connected")
        return client

    @classmethod
    def reset(cls) -> None:
        """Drop the cached client (used by tests)."""
        cls._instance = None

    @classmethod
    def _normalize_uuid(cls, uuid_value: str | UUID) -> str:
        """Convert UUID to string for queries."""
        return str(uuid_value) if isinstance(uuid_value, UUID) else uuid_value

    # -------------------------------------------------------------------------
    # Table Helpers
    # -------------------------------------------------------------------------

    @classmethod
    def fetch_all(
        cls,
        table: str,
        filters: dict[str, Any] | None = None,
        limit: int = 100,
    ) -> list[dict[str, Any]]:
        """
        Fetch rows from a table, newest first.

        Args:
            table: Table name
            filters: Optional column -> value equality filters
            limit: Maximum number of rows

        Raises:
            SupabaseClientError: If query fails
        """
        client = cls.get_client()

        try:
            query = client.table(table).select("*")
            for column, value in (filters or {}).items():
                query = query.eq(column, cls._normalize_uuid(value))
            response = query.order("created_at", desc=True).limit(limit).execute()

            rows = response.data or []
            logger.debug(f"Fetched {len(rows)} rows from {table}")
            return rows

        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to fetch rows from {table}: {e}",
                code="FETCH_FAILED",
                details={"table": table, "filters": filters or {}}
            )

    @classmethod
    def fetch_one(cls, table: str, record_id: str | UUID) -> dict[str, Any] | None:
        """
        Fetch a single row by ID.

        Returns:
            Row dict, or None if not found

        Raises:
            SupabaseClientError: If query fails
        """
        client = cls.get_client()
        record_id_str = cls._normalize_uuid(record_id)

        try:
            response = (
                client.table(table)
                .select("*")
                .eq("id", record_id_str)
                .single()
                .execute()
            )

            return response.data

        except Exception as e:
            # Check if it's a "not found" error
            if "PGRST116" in str(e):  # PostgREST code for no rows
                return None
            raise SupabaseClientError(
                message=f"Failed to fetch row from {table}: {e}",
                code="FETCH_ONE_FAILED",
                details={"table": table, "id": record_id_str}
            )

    @classmethod
    def insert_one(cls, table: str, data: dict[str, Any]) -> dict[str, Any]:
        """
        Insert a row and return it as stored.

        Raises:
            SupabaseClientError: If the insert fails or returns nothing
        """
        client = cls.get_client()

        try:
            response = client.table(table).insert(data).execute()
        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to insert into {table}: {e}",
                code="INSERT_FAILED",
                details={"table": table}
            )

        if not response.data:
            raise SupabaseClientError(
                message=f"Insert into {table} returned no data",
                code="INSERT_FAILED",
                details={"table": table}
            )

        logger.info(f"Inserted row {response.data[0].get('id')} into {table}")
        return response.data[0]
