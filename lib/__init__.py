# =============================================================================
# lib/ - Standalone Utility Modules
# =============================================================================
# This package contains reusable building blocks:
# - supabase_client.py: Typed Supabase wrapper (the database connector)
# - keepalive.py: Periodic self-ping that keeps an idle host awake
#
# These modules are self-contained and can be tested in isolation.
# =============================================================================

from lib.supabase_client import (
    SupabaseClient,
    SupabaseClientError,
    DatabaseConnectionError,
)
from lib.keepalive import (
    KeepAliveHandle,
    start_keepalive,
    install_shutdown_handlers,
)

__all__ = [
    # Supabase
    "SupabaseClient",
    "SupabaseClientError",
    "DatabaseConnectionError",
    # Keep-alive
    "KeepAliveHandle",
    "start_keepalive",
    "install_shutdown_handlers",
]
