# This project was developed with assistance from AI tools.
"""Declarative base and the shared async engine.

The engine is created lazily by SQLAlchemy: nothing connects until the
first query, so importing this module is safe without a running database.
"""

from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from sqlalchemy.orm import DeclarativeBase

from .config import db_settings


class Base(DeclarativeBase):
    pass


engine: AsyncEngine = create_async_engine(
    db_settings.DATABASE_URL,
    echo=db_settings.SQL_ECHO,
    pool_pre_ping=True,
)


async def dispose_engine() -> None:
    """Close pooled connections on application shutdown."""
    await engine.dispose()
