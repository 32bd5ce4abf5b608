# =============================================================================
# app/ - FastAPI Application Package
# =============================================================================
# This package contains the Supply Chain API web application:
# - main.py: App construction, middleware, error handlers, route mounting
# - server.py: Process entry point (uvicorn + keep-alive pinger)
# - config.py: Environment variable loading and settings
# - middleware.py: CORS and security headers
# - dependencies.py: Shared FastAPI dependencies (database, body parsing)
# - auth/: Token verification and /api/auth
# - routers/: API endpoint definitions organized by feature
# =============================================================================
