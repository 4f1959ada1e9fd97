"""SQLAlchemy async database wiring for the registration_service.

The engine and session factory are built from :class:`config.Settings` by the
application factory instead of at import time, so several applications (for
example one per test) can live side by side in one process.
"""

from __future__ import annotations

import logging
from typing import Tuple

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from registration_service.db_core import Base

logger = logging.getLogger(__name__)


def build_engine(
    database_url: str, echo: bool = False
) -> Tuple[AsyncEngine, async_sessionmaker[AsyncSession]]:
    """Return an async engine and a session factory bound to it."""
    engine = create_async_engine(database_url, echo=echo)
    session_factory = async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )
    return engine, session_factory


async def create_tables(engine: AsyncEngine) -> None:
    """Create missing tables (and their unique indexes) for all models."""
    # models must be imported so that their tables are registered on Base
    from registration_service import models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database tables verified/created.")
