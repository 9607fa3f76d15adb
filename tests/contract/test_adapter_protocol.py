"""Contract tests for adapter protocol compliance."""

from __future__ import annotations

import json
from unittest.mock import AsyncMock, MagicMock

import pytest

from artmapper.adapters.protocol import AsyncAdapter
from artmapper.adapters.sqlite import SqliteAsyncAdapter
from artmapper.core.connection import AsyncConnectionManager, ConnectionConfig
from artmapper.core.exceptions import AdapterError, ConnectionError, PoolError  # noqa: A004


@pytest.fixture
def memory_config() -> ConnectionConfig:
    return ConnectionConfig(driver="sqlite", database=":memory:", pool_size=1)


class TestSqliteAsyncAdapterProtocol:
    def test_implements_async_protocol(self) -> None:
        adapter = SqliteAsyncAdapter()
        assert isinstance(adapter, AsyncAdapter)

    def test_paramstyle(self) -> None:
        adapter = SqliteAsyncAdapter()
        assert adapter.paramstyle == "named"

    async def test_lifecycle(self, memory_config: ConnectionConfig) -> None:
        adapter = SqliteAsyncAdapter()
        pool = await adapter.create_pool_async(memory_config)
        assert len(pool) == 1

        conn = await adapter.acquire_connection_async(pool)
        assert conn is not None

        cursor = await adapter.execute_async(conn, "SELECT 1 AS val")
        row = await cursor.fetchone()
        assert row["val"] == 1

        await adapter.release_connection_async(conn, pool)
        assert len(pool) == 1

        await adapter.close_pool_async(pool)
        assert len(pool) == 0

    async def test_json_params(self, memory_config: ConnectionConfig) -> None:
        adapter = SqliteAsyncAdapter()
        pool = await adapter.create_pool_async(memory_config)
        conn = await adapter.acquire_connection_async(pool)
        try:
            cursor = await adapter.execute_async(
                conn,
                "SELECT json_extract(:info, '$.email') AS email",
                {"info": {"email": "ada@example.com"}},
            )
            row = await cursor.fetchone()
            assert row["email"] == "ada@example.com"
        finally:
            await adapter.release_connection_async(conn, pool)
            await adapter.close_pool_async(pool)

    async def test_exhausted_pool(self, memory_config: ConnectionConfig) -> None:
        adapter = SqliteAsyncAdapter()
        pool = await adapter.create_pool_async(memory_config)
        conn = await adapter.acquire_connection_async(pool)
        try:
            with pytest.raises(PoolError):
                await adapter.acquire_connection_async(pool)
        finally:
            await adapter.release_connection_async(conn, pool)
            await adapter.close_pool_async(pool)


# --- PostgreSQL protocol compliance ---


class TestPostgresqlAsyncAdapterProtocol:
    def test_implements_async_protocol(self) -> None:
        from artmapper.adapters.postgresql import PostgresqlAsyncAdapter

        adapter = PostgresqlAsyncAdapter()
        assert isinstance(adapter, AsyncAdapter)

    def test_paramstyle(self) -> None:
        from artmapper.adapters.postgresql import PostgresqlAsyncAdapter

        adapter = PostgresqlAsyncAdapter()
        assert adapter.paramstyle == "pyformat"

    def test_conninfo(self) -> None:
        from artmapper.adapters.postgresql import _build_conninfo

        config = ConnectionConfig(
            host="db", port=5432, user="app", database="gallery", extra={"sslmode": "require"}
        )
        assert _build_conninfo(config) == "host=db port=5432 user=app dbname=gallery sslmode=require"

    def test_json_params(self) -> None:
        from psycopg.types.json import Json

        from artmapper.adapters.postgresql import adapt_params

        adapted = adapt_params({"info": {"email": "ada@example.com"}, "id": 3, "tags": ["a"]})

        # json, not jsonb: the stored functions declare json parameters
        assert type(adapted["info"]) is Json
        assert adapted["info"].obj == {"email": "ada@example.com"}
        assert isinstance(adapted["tags"], Json)
        assert adapted["id"] == 3

    def test_empty_params(self) -> None:
        from artmapper.adapters.postgresql import adapt_params

        assert adapt_params(None) == {}

    async def test_release_keeps_healthy_connection(self) -> None:
        from artmapper.adapters.postgresql import PostgresqlAsyncAdapter

        adapter = PostgresqlAsyncAdapter()
        conn = MagicMock(closed=False, broken=False, close=AsyncMock())
        pool: list = []

        await adapter.release_connection_async(conn, pool)

        assert pool == [conn]
        conn.close.assert_not_awaited()

    @pytest.mark.parametrize("closed,broken", [(False, True), (True, False)])
    async def test_release_replaces_broken_connection(
        self, monkeypatch: pytest.MonkeyPatch, closed: bool, broken: bool
    ) -> None:
        from artmapper.adapters.postgresql import PostgresqlAsyncAdapter

        adapter = PostgresqlAsyncAdapter()
        fresh = MagicMock(closed=False, broken=False)
        monkeypatch.setattr(adapter, "_connect", AsyncMock(return_value=fresh))
        conn = MagicMock(closed=closed, broken=broken, close=AsyncMock())
        pool: list = []

        await adapter.release_connection_async(conn, pool)

        assert pool == [fresh]
        conn.close.assert_awaited_once()

    async def test_release_shrinks_pool_when_reconnect_fails(
        self, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        from artmapper.adapters.postgresql import PostgresqlAsyncAdapter

        adapter = PostgresqlAsyncAdapter()
        monkeypatch.setattr(
            adapter, "_connect", AsyncMock(side_effect=ConnectionError("server down"))
        )
        conn = MagicMock(closed=False, broken=True, close=AsyncMock())
        pool: list = []

        await adapter.release_connection_async(conn, pool)

        assert pool == []
        with pytest.raises(PoolError):
            await adapter.acquire_connection_async(pool)

    async def test_create_pool_uses_connect_timeout(self, monkeypatch: pytest.MonkeyPatch) -> None:
        import psycopg

        from artmapper.adapters.postgresql import PostgresqlAsyncAdapter

        connect = AsyncMock(side_effect=lambda *args, **kwargs: MagicMock(close=AsyncMock()))
        monkeypatch.setattr(psycopg.AsyncConnection, "connect", connect)
        config = ConnectionConfig(database="gallery", pool_size=2, connect_timeout=7)

        pool = await PostgresqlAsyncAdapter().create_pool_async(config)

        assert len(pool) == 2
        assert connect.await_args.kwargs["connect_timeout"] == 7

    async def test_create_pool_closes_opened_connections_on_failure(
        self, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        import psycopg

        from artmapper.adapters.postgresql import PostgresqlAsyncAdapter

        opened = MagicMock(close=AsyncMock())
        connect = AsyncMock(side_effect=[opened, psycopg.OperationalError("refused")])
        monkeypatch.setattr(psycopg.AsyncConnection, "connect", connect)
        config = ConnectionConfig(database="gallery", pool_size=2)

        with pytest.raises(ConnectionError, match="refused"):
            await PostgresqlAsyncAdapter().create_pool_async(config)

        opened.close.assert_awaited_once()


# --- Connection manager ---


class TestAsyncConnectionManager:
    def test_unknown_driver(self) -> None:
        with pytest.raises(AdapterError, match="Unsupported database driver"):
            AsyncConnectionManager(ConnectionConfig(driver="oracle", database="x"))

    def test_driver_name_is_case_insensitive(self) -> None:
        manager = AsyncConnectionManager(ConnectionConfig(driver="SQLite", database=":memory:"))
        assert isinstance(manager.adapter, SqliteAsyncAdapter)

    async def test_pool_is_lazy_and_closable(self, memory_config: ConnectionConfig) -> None:
        manager = AsyncConnectionManager(memory_config)
        assert manager._pool is None

        async with manager.get_connection() as conn:
            cursor = await conn.execute("SELECT 2 AS val")
            row = await cursor.fetchone()
            assert row["val"] == 2

        assert manager._pool is not None
        await manager.close_pool()
        assert manager._pool is None


def test_sqlite_params_encode_json_text() -> None:
    from artmapper.adapters.sqlite import adapt_params

    adapted = adapt_params({"info": {"a": 1}, "id": 2})
    assert json.loads(adapted["info"]) == {"a": 1}
    assert adapted["id"] == 2
