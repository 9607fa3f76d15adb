"""Shared test fixtures."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
from typing import Any
from unittest.mock import AsyncMock

import pytest

from artmapper.core.connection import ConnectionConfig


@pytest.fixture
def sqlite_config(tmp_path: Path) -> ConnectionConfig:
    """SQLite file-backed connection config with a single pooled connection."""
    return ConnectionConfig(driver="sqlite", database=str(tmp_path / "test.db"), pool_size=1)


@pytest.fixture
def tmp_sql_dir(tmp_path: Path) -> Path:
    """Temporary directory for SQL files."""
    return tmp_path / "sql"


@pytest.fixture
def write_sql(tmp_sql_dir: Path):
    """Helper to write SQL files into the temp directory.

    Usage:
        write_sql("user/get_by_id.sql", "select * from get_user_by_id(:id)")
    """

    def _write(relative_path: str, content: str) -> Path:
        file_path = tmp_sql_dir / relative_path
        file_path.parent.mkdir(parents=True, exist_ok=True)
        file_path.write_text(content, encoding="utf-8")
        return file_path

    return _write


@pytest.fixture
def fake_engine() -> Callable[[dict[str, Any]], AsyncMock]:
    """Build an engine double answering named queries from a dict.

    Values are either rows, an exception to raise, or a callable receiving
    the params and returning rows (or raising).

    Usage:
        engine = fake_engine({"user.get_by_id": [{"get_user_by_id": {"id": 1}}]})
    """

    def _make(responses: dict[str, Any]) -> AsyncMock:
        def execute(query_name: str, params: dict[str, Any] | None = None) -> Any:
            response = responses[query_name]
            if isinstance(response, BaseException):
                raise response
            if callable(response):
                return response(params)
            return response

        engine = AsyncMock()
        engine.execute = AsyncMock(side_effect=execute)
        return engine

    return _make
