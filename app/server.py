# =============================================================================
# app/server.py - Process Entry Point
# =============================================================================
# Runs the API under uvicorn and, in production, the keep-alive pinger.
#
# Startup order:
#   1. lifespan startup connects the database (fatal on failure)
#   2. the socket is bound and the port/environment are logged
#   3. production only: the pinger starts and SIGINT/SIGTERM are wired to
#      cancel it and shut the server down
#
# Usage:
#   python -m app
# =============================================================================

import asyncio
import logging
import sys

import uvicorn

from app.config import Settings, settings as default_settings
from lib.keepalive import KeepAliveHandle, install_shutdown_handlers, start_keepalive

logger = logging.getLogger(__name__)

# Exit status when the application never finished starting (matches uvicorn.run)
STARTUP_FAILURE = 3

# How often to check whether uvicorn has bound its socket
STARTUP_POLL_SECONDS = 0.05


def build_server(settings: Settings) -> uvicorn.Server:
    """Create the uvicorn server for the application."""
    config = uvicorn.Config(
        "app.main:app",
        host=settings.HOST,
        port=settings.PORT,
        lifespan="on",
        # Use the root logging config set up in app.main
        log_config=None,
        access_log=settings.DEBUG,
    )
    return uvicorn.Server(config)


async def wait_until_listening(server: uvicorn.Server, serve_task: asyncio.Task) -> bool:
    """
    Wait for uvicorn to bind its socket.

    Returns:
        True once the server is listening, False if it stopped before that
    """
    while not server.started:
        if serve_task.done():
            return False
        await asyncio.sleep(STARTUP_POLL_SECONDS)
    return True


def start_production_pinger(settings: Settings, server: uvicorn.Server) -> KeepAliveHandle:
    """Start the self-ping and make termination signals stop it and the server."""
    handle = start_keepalive(
        settings.KEEPALIVE_URL,
        interval=settings.KEEPALIVE_INTERVAL_SECONDS,
        timeout=settings.KEEPALIVE_TIMEOUT_SECONDS,
    )

    def request_exit() -> None:
        # uvicorn drains connections, runs lifespan shutdown and returns; the process then exits 0
        server.should_exit = True

    def request_force_exit() -> None:
        # A second signal skips waiting for open connections, as uvicorn does on its own
        server.force_exit = True

    install_shutdown_handlers(handle, on_exit=request_exit, on_force_exit=request_force_exit)
    return handle


async def run_server(server: uvicorn.Server) -> int | None:
    """
    Run uvicorn and turn its exit calls into a return value.

    uvicorn calls sys.exit(1) from inside startup when the socket can't be
    bound; a SystemExit escaping the task would stop the event loop before
    serve() sees it. A failed lifespan returns normally with started unset.

    Returns:
        The requested exit status, or None if the server returned normally
    """
    try:
        await server.serve()
    except SystemExit as exc:
        return exc.code if isinstance(exc.code, int) else STARTUP_FAILURE
    return None


async def serve(settings: Settings = default_settings, server: uvicorn.Server | None = None) -> int:
    """
    Run the server until it shuts down.

    Returns:
        Process exit status: 0 after a normal shutdown, uvicorn's startup
        exit status (STARTUP_FAILURE by default) if the application never started
    """
    server = server or build_server(settings)
    serve_task = asyncio.create_task(run_server(server))
    handle = None

    if await wait_until_listening(server, serve_task):
        logger.info(f"Server is running on port {settings.PORT}")
        logger.info(f"Environment: {settings.NODE_ENV}")

        if settings.is_production:
            handle = start_production_pinger(settings, server)

    exit_code = await serve_task

    if not server.started:
        logger.critical("Application failed to start, exiting")
        return exit_code or STARTUP_FAILURE

    # Shutdown that didn't come through our signal handlers still stops the pinger
    if handle is not None:
        handle.cancel()

    return 0


def main() -> None:
    """Console entry point."""
    sys.exit(asyncio.run(serve()))
