"""Pooled HTTP client for calls to the mock employee backend.

One ``httpx.AsyncClient`` is opened per application lifespan so every
outbound request reuses the same connection pool.
"""

from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

import httpx

from employee_gateway.app.core.config import Settings, settings as default_settings
from employee_gateway.app.core.logging import get_logger

logger = get_logger(__name__)


def build_timeout(config: Settings) -> httpx.Timeout:
    return httpx.Timeout(
        connect=config.httpx_connect_timeout,
        read=config.httpx_read_timeout,
        write=config.httpx_write_timeout,
        pool=config.httpx_pool_timeout,
    )


def build_limits(config: Settings) -> httpx.Limits:
    return httpx.Limits(
        max_connections=config.httpx_max_connections,
        max_keepalive_connections=config.httpx_max_keepalive_connections,
        keepalive_expiry=config.httpx_keepalive_expiry,
    )


@asynccontextmanager
async def init_http_client(config: Optional[Settings] = None) -> AsyncIterator[httpx.AsyncClient]:
    """Open the pooled client for the duration of the block.

    Used from the FastAPI lifespan::

        async with init_http_client(settings) as http_client:
            app.state.employee_service = EmployeeService(
                MockEmployeeClient(base_url, http_client=http_client)
            )
            yield
    """
    config = config or default_settings
    client = httpx.AsyncClient(timeout=build_timeout(config), limits=build_limits(config))
    logger.debug(
        f"Opened HTTP client pool (max_connections={config.httpx_max_connections})"
    )
    try:
        yield client
    finally:
        await client.aclose()
        logger.debug("Closed HTTP client pool")
