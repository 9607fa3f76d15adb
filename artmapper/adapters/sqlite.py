"""SQLite adapter - async (aiosqlite).

Used for local runs and tests. SQLite has no JSON parameter type, so dict
and list values are bound as JSON text.
"""

from __future__ import annotations

import json
from typing import Any

from artmapper.core.connection import ConnectionConfig
from artmapper.core.exceptions import PoolError


def adapt_params(params: dict[str, Any] | None) -> dict[str, Any]:
    if not params:
        return {}
    return {
        key: json.dumps(value) if isinstance(value, (dict, list)) else value
        for key, value in params.items()
    }


class SqliteAsyncAdapter:
    """Asynchronous SQLite adapter using aiosqlite."""

    @property
    def paramstyle(self) -> str:
        return "named"

    async def create_pool_async(self, config: ConnectionConfig) -> list[Any]:
        """Create async SQLite connection pool."""
        import aiosqlite

        pool: list[Any] = []
        for _ in range(config.pool_size):
            conn = await aiosqlite.connect(config.database, timeout=config.connect_timeout)
            conn.row_factory = aiosqlite.Row
            await conn.execute("PRAGMA journal_mode=WAL")
            pool.append(conn)
        return pool

    async def acquire_connection_async(self, pool: list[Any]) -> Any:
        """Acquire an async connection from the pool."""
        if not pool:
            raise PoolError("No connections available in pool")
        return pool.pop()

    async def release_connection_async(self, connection: Any, pool: list[Any]) -> None:
        """Release an async connection back to the pool."""
        pool.append(connection)

    async def close_pool_async(self, pool: list[Any]) -> None:
        """Close all async connections."""
        for conn in pool:
            await conn.close()
        pool.clear()

    async def execute_async(
        self,
        connection: Any,
        sql: str,
        params: dict[str, Any] | None = None,
    ) -> Any:
        """Execute SQL asynchronously and return a cursor."""
        return await connection.execute(sql, adapt_params(params))
