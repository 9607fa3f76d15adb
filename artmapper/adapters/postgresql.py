"""PostgreSQL adapter - async using psycopg (v3+)."""

from __future__ import annotations

import logging
from typing import Any

from artmapper.core.connection import ConnectionConfig
from artmapper.core.exceptions import ConnectionError, PoolError  # noqa: A004

logger = logging.getLogger(__name__)


def _build_conninfo(config: ConnectionConfig) -> str:
    """Build a libpq connection string from config fields."""
    parts: list[str] = []
    if config.host is not None:
        parts.append(f"host={config.host}")
    if config.port is not None:
        parts.append(f"port={config.port}")
    if config.user is not None:
        parts.append(f"user={config.user}")
    if config.password is not None:
        parts.append(f"password={config.password}")
    parts.append(f"dbname={config.database}")
    for key, value in config.extra.items():
        parts.append(f"{key}={value}")
    return " ".join(parts)


def adapt_params(params: dict[str, Any] | None) -> dict[str, Any]:
    """Wrap dict and list values as json so stored functions get json arguments."""
    from psycopg.types.json import Json

    if not params:
        return {}
    return {
        key: Json(value) if isinstance(value, (dict, list)) else value
        for key, value in params.items()
    }


class PostgresqlAsyncAdapter:
    """Asynchronous PostgreSQL adapter using psycopg (v3+) async support.

    The pool is a plain list of open connections, so at most ``pool_size``
    calls run at once; a call arriving while every connection is checked
    out gets PoolError. A connection that comes back closed or broken is
    replaced with a fresh one.
    """

    def __init__(self) -> None:
        self._conninfo: str | None = None
        self._connect_timeout: int | None = None

    @property
    def paramstyle(self) -> str:
        return "pyformat"

    async def _connect(self) -> Any:
        import psycopg
        import psycopg.rows

        try:
            return await psycopg.AsyncConnection.connect(
                self._conninfo,
                row_factory=psycopg.rows.dict_row,
                connect_timeout=self._connect_timeout,
            )
        except psycopg.OperationalError as e:
            raise ConnectionError(f"Cannot connect to PostgreSQL: {e}") from e

    async def create_pool_async(self, config: ConnectionConfig) -> list[Any]:
        self._conninfo = _build_conninfo(config)
        self._connect_timeout = config.connect_timeout
        pool: list[Any] = []
        try:
            for _ in range(config.pool_size):
                pool.append(await self._connect())
        except ConnectionError:
            for conn in pool:
                await conn.close()
            raise
        return pool

    async def acquire_connection_async(self, pool: list[Any]) -> Any:
        if not pool:
            raise PoolError("No connections available in pool")
        return pool.pop()

    async def release_connection_async(self, connection: Any, pool: list[Any]) -> None:
        if not (connection.closed or connection.broken):
            pool.append(connection)
            return

        logger.warning("Discarding broken PostgreSQL connection")
        await connection.close()
        try:
            pool.append(await self._connect())
        except ConnectionError as e:
            # the pool shrinks until the next successful replacement
            logger.error("Could not replace broken connection: %s", e)

    async def close_pool_async(self, pool: list[Any]) -> None:
        for conn in pool:
            await conn.close()
        pool.clear()

    async def execute_async(
        self,
        connection: Any,
        sql: str,
        params: dict[str, Any] | None = None,
    ) -> Any:
        return await connection.execute(sql, adapt_params(params))
