# =============================================================================
# lib/keepalive.py - Keep-Alive Self-Ping
# =============================================================================
# Hosting platforms that suspend idle services watch public inbound traffic.
# This module keeps the service awake by periodically sending a GET to its
# own public /health URL.
#
# Lifecycle:
#   inactive --start_keepalive()--> active --handle.cancel()--> stopped
#
# Each tick launches a detached ping: the scheduler never waits for it, a
# slow ping may overlap the next one, and failures are only logged.
#
# Usage:
#   handle = start_keepalive(settings.KEEPALIVE_URL)
#   install_shutdown_handlers(handle, on_exit=request_server_shutdown)
# =============================================================================

from __future__ import annotations

import asyncio
import logging
import signal
import sys
from datetime import datetime, timezone
from typing import Awaitable, Callable, Iterable

import httpx

logger = logging.getLogger(__name__)

DEFAULT_INTERVAL_SECONDS = 30.0
DEFAULT_TIMEOUT_SECONDS = 10.0
SHUTDOWN_SIGNALS = (signal.SIGINT, signal.SIGTERM)

Clock = Callable[[], float]
Sleep = Callable[[float], Awaitable[None]]


class KeepAliveHandle:
    """
    Owned, cancellable reference to a running keep-alive loop.

    Created by start_keepalive(). Cancelling stops future pings only;
    pings already in flight finish (or fail) on their own.
    """

    def __init__(self) -> None:
        self._task: asyncio.Task | None = None
        self._in_flight: set[asyncio.Task] = set()
        self._cancelled = False
        self.ping_count = 0

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    @property
    def in_flight(self) -> frozenset[asyncio.Task]:
        """Ping tasks that have been launched and not yet finished."""
        return frozenset(self._in_flight)

    def cancel(self) -> bool:
        """
        Stop the loop.

        Returns:
            True on the first call, False if the handle was already cancelled
        """
        if self._cancelled:
            return False
        self._cancelled = True
        if self._task is not None:
            self._task.cancel()
        logger.info(f"Keep-alive pinger stopped after {self.ping_count} ping(s)")
        return True

    def _launch(self, ping: Awaitable[int | None]) -> None:
        # Keep a strong reference until the task finishes so it isn't collected mid-flight
        task = asyncio.ensure_future(ping)
        self._in_flight.add(task)
        task.add_done_callback(self._in_flight.discard)
        self.ping_count += 1


async def ping_once(
    url: str,
    timeout: float = DEFAULT_TIMEOUT_SECONDS,
    transport: httpx.AsyncBaseTransport | None = None,
) -> int | None:
    """
    Send one self-ping.

    Any HTTP response counts as success, whatever its status code. Only
    transport-level errors (DNS, connection, timeout) are failures.

    Returns:
        The response status code, or None if the request failed
    """
    try:
        async with httpx.AsyncClient(timeout=timeout, transport=transport) as client:
            response = await client.get(url)
    except Exception as e:
        logger.error(f"Self-ping failed: {_describe(e)}")
        return None

    logger.info(
        f"Self-ping successful: {response.status_code} - "
        f"{datetime.now(timezone.utc).isoformat()}"
    )
    return response.status_code


def _describe(error: Exception) -> str:
    # httpx timeouts often carry an empty message
    return str(error) or type(error).__name__


async def _run(
    handle: KeepAliveHandle,
    url: str,
    interval: float,
    timeout: float,
    clock: Clock,
    sleep: Sleep,
    transport: httpx.AsyncBaseTransport | None,
) -> None:
    started_at = clock()
    tick = 0

    while True:
        tick += 1
        # Deadlines are anchored to the start time so ping N fires at start + N * interval
        await sleep(max(0.0, started_at + tick * interval - clock()))
        handle._launch(ping_once(url, timeout=timeout, transport=transport))


def start_keepalive(
    url: str,
    interval: float = DEFAULT_INTERVAL_SECONDS,
    timeout: float = DEFAULT_TIMEOUT_SECONDS,
    *,
    clock: Clock | None = None,
    sleep: Sleep | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> KeepAliveHandle:
    """
    Schedule the periodic self-ping on the running event loop.

    The first ping fires one interval after this call.

    Args:
        url: Public health URL of this service
        interval: Seconds between pings
        timeout: Upper bound for a single ping request
        clock: Monotonic time source (defaults to the loop clock)
        sleep: Coroutine used to wait between ticks (defaults to asyncio.sleep)
        transport: Optional httpx transport, mainly for tests

    Returns:
        KeepAliveHandle owning the scheduled loop
    """
    loop = asyncio.get_running_loop()
    handle = KeepAliveHandle()
    handle._task = loop.create_task(
        _run(
            handle,
            url,
            interval,
            timeout,
            clock or loop.time,
            sleep or asyncio.sleep,
            transport,
        ),
        name="keepalive",
    )
    logger.info(f"Keep-alive pinger started: GET {url} every {interval:g}s")
    return handle


def _exit_success() -> None:
    sys.exit(0)


def install_shutdown_handlers(
    handle: KeepAliveHandle,
    on_exit: Callable[[], None] = _exit_success,
    on_force_exit: Callable[[], None] | None = None,
    signals: Iterable[signal.Signals] = SHUTDOWN_SIGNALS,
    loop: asyncio.AbstractEventLoop | None = None,
) -> Callable[[str], None]:
    """
    Stop the pinger and exit when SIGINT or SIGTERM arrives.

    The cleanup runs at most once, even if both signals are delivered. Any
    later signal calls on_force_exit instead, if given.

    Args:
        handle: The pinger to cancel
        on_exit: Called after cancelling; must end the process with status 0
        on_force_exit: Called for every signal after the first, to cut a
            graceful shutdown short
        signals: Signals to subscribe to
        loop: Event loop to register on (defaults to the running loop)

    Returns:
        The cleanup callback, taking the signal name
    """
    loop = loop or asyncio.get_running_loop()

    def shutdown(signal_name: str) -> None:
        if not handle.cancel():
            if on_force_exit is None:
                logger.debug(f"Ignoring {signal_name}: pinger already stopped")
                return
            logger.warning(f"Received {signal_name} again, forcing exit")
            on_force_exit()
            return
        logger.info(f"Received {signal_name}, shutting down")
        on_exit()

    for sig in signals:
        try:
            loop.add_signal_handler(sig, shutdown, sig.name)
        except NotImplementedError:
            # Windows event loops can't watch signals; fall back to the process-wide handler
            signal.signal(
                sig,
                lambda signum, frame: loop.call_soon_threadsafe(
                    shutdown, signal.Signals(signum).name
                ),
            )

    return shutdown
