# This project was developed with assistance from AI tools.
"""Tests for the store query client (mocked engine, no database)."""

import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest
from sqlalchemy.exc import OperationalError

from src.core.errors import StoreError
from src.services.store import QueryClient, QueryResult


def _make_engine(result=None, side_effect=None):
    conn = MagicMock()
    conn.exec_driver_sql = AsyncMock(return_value=result, side_effect=side_effect)
    engine = MagicMock()
    engine.begin.return_value.__aenter__.return_value = conn
    engine.begin.return_value.__aexit__.return_value = False
    return engine, conn


def _rows_result(rows):
    result = MagicMock()
    result.returns_rows = True
    result.mappings.return_value = rows
    return result


@pytest.mark.asyncio
async def test_fetch_returns_rows_and_count():
    engine, conn = _make_engine(_rows_result([{"id": 1}, {"id": 2}]))
    client = QueryClient(engine, timeout=1)

    result = await client.fetch("SELECT c.id FROM cases c WHERE c.id = $1", [1])

    assert result == QueryResult(2, [{"id": 1}, {"id": 2}])
    conn.exec_driver_sql.assert_awaited_once_with("SELECT c.id FROM cases c WHERE c.id = $1", (1,))


@pytest.mark.asyncio
async def test_fetch_statement_without_rows_reports_rowcount():
    result = MagicMock()
    result.returns_rows = False
    result.rowcount = 1
    engine, _ = _make_engine(result)

    assert await QueryClient(engine).fetch("INSERT INTO access_logs VALUES ($1)", ["x"]) == (1, [])


@pytest.mark.asyncio
async def test_timeout_raises_store_error_once():
    async def _slow(*_args):
        await asyncio.sleep(1)

    engine, conn = _make_engine(side_effect=_slow)
    client = QueryClient(engine, timeout=0.01)

    with pytest.raises(StoreError, match="timed out"):
        await client.fetch("SELECT 1")
    assert conn.exec_driver_sql.await_count == 1


@pytest.mark.asyncio
async def test_driver_error_raises_store_error():
    engine, conn = _make_engine(
        side_effect=OperationalError("SELECT 1", (), Exception("connection refused"))
    )

    with pytest.raises(StoreError, match="failed"):
        await QueryClient(engine, timeout=1).fetch("SELECT 1")
    assert conn.exec_driver_sql.await_count == 1
