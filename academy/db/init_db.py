"""Create all tables that do not exist yet. Safe to run repeatedly."""
import asyncio
import logging
import logging.config

from sqlalchemy.ext.asyncio import AsyncEngine

import academy.auth.models  # noqa: F401  (registers users table)
import academy.core.models  # noqa: F401
from academy.core.config import LOGGING
from academy.db.session import Base, engine

logger = logging.getLogger(__name__)


async def create_tables(bind: AsyncEngine = engine) -> None:
    async with bind.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Tables ready: %s", ", ".join(sorted(Base.metadata.tables)))


if __name__ == "__main__":
    logging.config.dictConfig(LOGGING)
    asyncio.run(create_tables())
