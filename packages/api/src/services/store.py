# This project was developed with assistance from AI tools.
"""Parameterized query client for the shared record store.

Statements use positional ``$n`` placeholders and go straight to the asyncpg
driver through ``exec_driver_sql``, so predicate fragments built by the
access engine can be concatenated into a statement without rewriting.
"""

import asyncio
import logging
from collections.abc import Sequence
from typing import Any, NamedTuple, Protocol

from db import engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine

from ..core.config import settings
from ..core.errors import StoreError

logger = logging.getLogger(__name__)


class QueryResult(NamedTuple):
    rowcount: int
    rows: list[dict[str, Any]]


class SupportsFetch(Protocol):
    """Anything that runs a positional-parameter statement and returns rows."""

    async def fetch(self, sql: str, params: Sequence[Any] = ()) -> QueryResult: ...


class QueryClient:
    """Runs one statement per call inside its own transaction.

    Failures and timeouts raise ``StoreError``. Nothing is retried: a
    permission check that failed transiently must surface, not be masked.
    """

    def __init__(self, db_engine: AsyncEngine, *, timeout: float | None = None):
        self._engine = db_engine
        self._timeout = timeout

    async def fetch(self, sql: str, params: Sequence[Any] = ()) -> QueryResult:
        try:
            return await asyncio.wait_for(self._execute(sql, tuple(params)), timeout=self._timeout)
        except asyncio.TimeoutError as exc:
            logger.error("Store query exceeded %ss timeout", self._timeout)
            raise StoreError("Store query timed out") from exc
        except SQLAlchemyError as exc:
            logger.error("Store query failed: %s", exc.__class__.__name__)
            raise StoreError("Store query failed") from exc

    async def _execute(self, sql: str, params: tuple) -> QueryResult:
        async with self._engine.begin() as conn:
            result = await conn.exec_driver_sql(sql, params)
            if result.returns_rows:
                rows = [dict(row) for row in result.mappings()]
                return QueryResult(len(rows), rows)
            return QueryResult(result.rowcount, [])


_client: QueryClient | None = None


def get_query_client() -> QueryClient:
    """FastAPI dependency: shared client over the process engine."""
    global _client  # noqa: PLW0603
    if _client is None:
        _client = QueryClient(engine, timeout=settings.QUERY_TIMEOUT_SECONDS)
    return _client
