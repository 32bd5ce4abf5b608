# =============================================================================
# app/main.py - FastAPI Application Entry Point
# =============================================================================
# This is the main entry point for the Supply Chain API.
# It configures the FastAPI application with middleware, routers, and handlers.
#
# Usage:
#   python -m app                      (binds PORT, runs the keep-alive pinger in production)
#   uvicorn app.main:app --reload      (development, no pinger)
# =============================================================================

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from app.config import settings
from app.exceptions import (
    SupplyChainException,
    supply_chain_exception_handler,
)
from app.middleware import install_middleware
from app.routers import health, users, products, batches, consumer
from app.auth import routes as auth_routes
from lib.supabase_client import DatabaseConnectionError, SupabaseClient

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    Startup connects the database before any socket is bound; if the
    store is unreachable the exception aborts startup and nothing is served.
    """
    logger.info(f"Starting {settings.SERVICE_NAME} in {settings.NODE_ENV} mode")

    try:
        SupabaseClient.connect()
    except DatabaseConnectionError as e:
        logger.critical(f"Database connection failed, aborting startup: {e}")
        raise

    yield

    logger.info(f"Shutting down {settings.SERVICE_NAME}")


# Create FastAPI application
app = FastAPI(
    title=settings.SERVICE_NAME,
    description="Products, production batches and consumer tracing for a supply chain.",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
    openapi_tags=[
        {"name": "Auth", "description": "Token verification and the caller's profile"},
        {"name": "Users", "description": "User profiles"},
        {"name": "Products", "description": "Product catalogue"},
        {"name": "Batches", "description": "Production batches of products"},
        {"name": "Consumer", "description": "Public batch tracing"},
        {"name": "Health", "description": "Welcome and health checks"},
    ],
)


# =============================================================================
# Middleware
# =============================================================================

install_middleware(app)


# =============================================================================
# Exception Handlers
# =============================================================================

app.add_exception_handler(SupplyChainException, supply_chain_exception_handler)


# =============================================================================
# Routers
# =============================================================================

app.include_router(health.router, tags=["Health"])

app.include_router(
    auth_routes.router,
    prefix="/api/auth",
    tags=["Auth"]
)

app.include_router(
    users.router,
    prefix="/api/users",
    tags=["Users"]
)

app.include_router(
    products.router,
    prefix="/api/products",
    tags=["Products"]
)

app.include_router(
    batches.router,
    prefix="/api/batches",
    tags=["Batches"]
)

app.include_router(
    consumer.router,
    prefix="/api/consumer",
    tags=["Consumer"]
)
