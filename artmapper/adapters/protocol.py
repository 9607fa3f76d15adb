"""Database adapter protocol.

An adapter owns everything driver-specific: how the pool is built, how
connections are handed out, which paramstyle the SQL must use and how
JSON arguments for stored functions are bound.
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

from artmapper.core.connection import ConnectionConfig


@runtime_checkable
class AsyncAdapter(Protocol):
    """What AsyncConnectionManager and AsyncEngine need from a driver."""

    @property
    def paramstyle(self) -> str:
        """'named' for :name placeholders, 'pyformat' for %(name)s."""
        ...

    async def create_pool_async(self, config: ConnectionConfig) -> Any: ...

    async def acquire_connection_async(self, pool: Any) -> Any:
        """Hand out a connection; raise PoolError when none is free."""
        ...

    async def release_connection_async(self, connection: Any, pool: Any) -> None: ...

    async def close_pool_async(self, pool: Any) -> None: ...

    async def execute_async(
        self,
        connection: Any,
        sql: str,
        params: dict[str, Any] | None = None,
    ) -> Any:
        """Run *sql* with dict/list params bound as JSON; return the cursor."""
        ...
