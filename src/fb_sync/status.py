"""Server liveness checks.

``check_server_status()`` opens a connection, runs a catalog round-trip that
touches no user data, and reports latency.  It never raises: every failure
becomes ``online=False`` with the error message and the time spent up to the
failure.

``check_servers()`` checks a pair concurrently and returns once both checks
have finished.

Usage:
    import asyncio
    from fb_sync.status import check_servers

    response = asyncio.run(check_servers(server_a, server_b))
    print(response.server_a.online, response.server_b.response_time)
"""

import asyncio
import logging
import time

from sqlalchemy import text

from fb_sync.config.models import ServerConfig
from fb_sync.errors import ServerConnectionError, error_kind, error_message
from fb_sync.factory import open_connection
from fb_sync.schema.models import ServerStatus, ServerStatusResponse

logger = logging.getLogger(__name__)

PROBE_QUERY = "SELECT 1 FROM RDB$DATABASE"


def _elapsed_ms(started: float) -> int:
    return max(0, int((time.perf_counter() - started) * 1000))


def check_server_status(config: ServerConfig) -> ServerStatus:
    """Check that a server accepts connections and answers a query.

    Args:
        config: Server to probe.

    Returns:
        ``ServerStatus`` labelled ``host:port``.
    """
    status = ServerStatus(host=config.label)
    logger.info("Checking server status for %s", config.label)

    started = time.perf_counter()
    try:
        with open_connection(config) as conn:
            conn.execute(text(PROBE_QUERY)).scalar()
        status.online = True
        status.response_time = _elapsed_ms(started)
        logger.info(
            "Server %s is online (Response: %dms)", config.label, status.response_time
        )
    except Exception as e:
        status.online = False
        status.response_time = _elapsed_ms(started)
        status.error = error_message(e)
        status.error_kind = error_kind(e, ServerConnectionError.kind)
        logger.error("Server %s check failed: %s", config.label, status.error)

    return status


async def check_servers(
    server_a: ServerConfig,
    server_b: ServerConfig,
) -> ServerStatusResponse:
    """Check two servers concurrently and wait for both.

    Each check runs in a worker thread; the driver is blocking.

    Returns:
        ``ServerStatusResponse``.  ``success`` means the checks ran, not
        that the servers are online.
    """
    logger.info("Checking status for servers: %s and %s", server_a.label, server_b.label)
    status_a, status_b = await asyncio.gather(
        asyncio.to_thread(check_server_status, server_a),
        asyncio.to_thread(check_server_status, server_b),
    )
    return ServerStatusResponse(server_a=status_a, server_b=status_b, success=True)
