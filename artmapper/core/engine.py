"""Query execution engine.

The AsyncEngine is the Database Client the data mapper talks to: it
resolves named queries from the SQLRegistry, binds parameters, executes
through the adapter and hands back rows as plain dicts.
"""

from __future__ import annotations

import logging
from typing import Any, Protocol, runtime_checkable

from artmapper.core.connection import AsyncConnectionManager, ConnectionConfig
from artmapper.core.exceptions import QueryExecutionError
from artmapper.core.params import normalize_params
from artmapper.core.registry import SQLRegistry, default_registry

logger = logging.getLogger(__name__)


@runtime_checkable
class DatabaseClient(Protocol):
    """Anything that can run a named, parameterized query and return rows."""

    async def execute(
        self,
        query_name: str,
        params: dict[str, Any] | None = None,
    ) -> list[dict[str, Any]]: ...


def _wrap_driver_error(query_name: str, exc: Exception) -> QueryExecutionError:
    """Wrap a driver exception, keeping SQLSTATE and constraint when exposed."""
    sqlstate = getattr(exc, "sqlstate", None)
    diag = getattr(exc, "diag", None)
    constraint_name = getattr(diag, "constraint_name", None) if diag is not None else None
    return QueryExecutionError(query_name, str(exc), sqlstate, constraint_name)


async def _rows_to_dicts(cursor: Any) -> list[dict[str, Any]]:
    """Convert cursor results to a list of dicts.

    Handles both tuple-like rows and dict-like rows from different adapters.
    """
    if cursor.description is None:
        return []
    columns = [desc[0] for desc in cursor.description]
    rows = await cursor.fetchall()
    if not rows:
        return []

    # psycopg dict_row already yields dicts
    if isinstance(rows[0], dict):
        return [dict(row) for row in rows]

    return [dict(zip(columns, row, strict=True)) for row in rows]


class AsyncEngine:
    """Asynchronous query execution engine."""

    def __init__(
        self,
        connection_manager: AsyncConnectionManager,
        registry: SQLRegistry | None = None,
    ) -> None:
        self._connection_manager = connection_manager
        self._registry = registry if registry is not None else default_registry()
        self._paramstyle = connection_manager.adapter.paramstyle

    @classmethod
    def from_config(
        cls,
        config: ConnectionConfig,
        registry: SQLRegistry | None = None,
    ) -> AsyncEngine:
        """Create an AsyncEngine from a ConnectionConfig.

        Args:
            config: ConnectionConfig instance
            registry: SQLRegistry instance; the bundled queries when omitted

        Returns:
            AsyncEngine instance
        """
        return cls(AsyncConnectionManager(config), registry)

    @property
    def registry(self) -> SQLRegistry:
        return self._registry

    async def execute(
        self,
        query_name: str,
        params: dict[str, Any] | None = None,
    ) -> list[dict[str, Any]]:
        """Run a named query and return its rows.

        The connection is committed after a successful call since stored
        functions may write. Driver failures are raised as
        QueryExecutionError with the original exception chained.
        """
        sql = self._registry.get(query_name)
        sql = normalize_params(sql, self._paramstyle)

        async with self._connection_manager.get_connection() as conn:
            try:
                cursor = await self._connection_manager.adapter.execute_async(conn, sql, params)
                rows = await _rows_to_dicts(cursor)
                await conn.commit()
            except Exception as e:
                await conn.rollback()
                raise _wrap_driver_error(query_name, e) from e

        logger.debug("%s returned %d row(s)", query_name, len(rows))
        return rows

    async def close(self) -> None:
        """Close the underlying connection pool."""
        await self._connection_manager.close_pool()
