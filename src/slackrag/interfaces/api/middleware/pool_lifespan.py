"""Lifespan middleware - opens the pool on startup, releases clients on shutdown."""

from typing import Any

import httpx
from psycopg_pool import AsyncConnectionPool


class PoolLifespanMiddleware:
    """Opens the connection pool on startup and closes it (and the shared HTTP client) on shutdown."""

    def __init__(self, pool: AsyncConnectionPool, http: httpx.AsyncClient | None = None) -> None:
        self._pool = pool
        self._http = http

    async def process_startup(
        self, scope: dict[str, Any], event: dict[str, Any]
    ) -> None:
        """Open pool when ASGI server starts."""
        await self._pool.open()

    async def process_shutdown(
        self, scope: dict[str, Any], event: dict[str, Any]
    ) -> None:
        """Close pool and HTTP client when ASGI server shuts down."""
        await self._pool.close()
        if self._http is not None:
            await self._http.aclose()
