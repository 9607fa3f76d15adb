"""Connection configuration and management.

ConnectionConfig is a Pydantic model for type-safe connection config.
AsyncConnectionManager loads the adapter for the configured driver and
owns the lazily created pool.
"""

from __future__ import annotations

import importlib
import logging
from contextlib import asynccontextmanager
from typing import Any

from pydantic import BaseModel

from artmapper.core.exceptions import AdapterError

logger = logging.getLogger(__name__)


class ConnectionConfig(BaseModel):
    """Configuration for database connections."""

    driver: str = "postgresql"
    host: str | None = None
    port: int | None = None
    user: str | None = None
    password: str | None = None
    database: str
    pool_size: int = 5
    # seconds to wait when opening a connection; also the sqlite busy timeout
    connect_timeout: int = 30
    extra: dict[str, Any] = {}


# driver name -> (module_path, adapter class)
_ADAPTER_MAP: dict[str, tuple[str, str]] = {
    "sqlite": ("artmapper.adapters.sqlite", "SqliteAsyncAdapter"),
    "postgresql": ("artmapper.adapters.postgresql", "PostgresqlAsyncAdapter"),
}


def _load_adapter(driver: str) -> Any:
    """Load an async adapter by driver name."""
    driver_lower = driver.lower()
    if driver_lower not in _ADAPTER_MAP:
        raise AdapterError(f"Unsupported database driver: {driver}")

    module_path, cls_name = _ADAPTER_MAP[driver_lower]
    try:
        module = importlib.import_module(module_path)
        return getattr(module, cls_name)()
    except (ImportError, AttributeError) as e:
        raise AdapterError(f"Failed to load adapter for '{driver}': {e}") from e


class AsyncConnectionManager:
    """Asynchronous connection manager using the AsyncAdapter protocol."""

    def __init__(self, config: ConnectionConfig) -> None:
        self.config = config
        self._adapter = _load_adapter(config.driver)
        self._pool: Any = None

    @property
    def adapter(self) -> Any:
        return self._adapter

    async def initialize_pool(self) -> Any:
        if self._pool is None:
            self._pool = await self._adapter.create_pool_async(self.config)
            logger.info(
                "Opened %s pool (%d connections) on %s",
                self.config.driver,
                self.config.pool_size,
                self.config.database,
            )
        return self._pool

    @asynccontextmanager
    async def get_connection(self):  # type: ignore[no-untyped-def]
        """Get an async connection from the pool as an async context manager."""
        if self._pool is None:
            await self.initialize_pool()
        connection = await self._adapter.acquire_connection_async(self._pool)
        try:
            yield connection
        finally:
            await self._adapter.release_connection_async(connection, self._pool)

    async def close_pool(self) -> None:
        if self._pool is not None:
            await self._adapter.close_pool_async(self._pool)
            self._pool = None
            logger.info("Closed %s pool", self.config.driver)
