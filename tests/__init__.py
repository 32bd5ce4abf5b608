# =============================================================================
# tests/ - Test Suite
# =============================================================================
# This package contains all tests for the Supply Chain API:
# - test_keepalive.py: Self-ping scheduling, pings and signal handling
# - test_server.py: Process startup ordering and exit status
# - test_api.py: Welcome/health endpoints, error handling, middleware
# - test_routes.py: Auth, users, products, batches, consumer routes
# - test_body_parsing.py: Nested form body expansion
# - test_supabase_client.py: Database connector
#
# Run tests with: pytest
# =============================================================================
