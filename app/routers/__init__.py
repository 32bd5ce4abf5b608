# =============================================================================
# app/routers/ - API Route Definitions
# =============================================================================
# This package contains FastAPI routers organized by feature:
# - health.py: Welcome and health endpoints
# - users.py: User profiles
# - products.py: Product catalogue
# - batches.py: Production batches
# - consumer.py: Public batch tracing
#
# Each router is mounted in main.py with a URL prefix.
# =============================================================================

from . import health
from . import users
from . import products
from . import batches
from . import consumer

__all__ = [
    "health",
    "users",
    "products",
    "batches",
    "consumer",
]
