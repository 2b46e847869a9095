"""Create the booking tables directly from the table metadata (development only)."""

import asyncio

import structlog

from clinic_api.database import engine
from clinic_api.middleware.logging import configure_logging
from clinic_api.models import metadata

logger = structlog.get_logger("scripts.init_db")


async def init_db(drop_existing: bool = False) -> None:
    """Create all tables, optionally dropping them first."""
    async with engine.begin() as conn:
        if drop_existing:
            await conn.run_sync(metadata.drop_all)
            logger.warning("tables_dropped", tables=sorted(metadata.tables))

        await conn.run_sync(metadata.create_all)

    await engine.dispose()
    logger.info("database_initialized", tables=sorted(metadata.tables))


if __name__ == "__main__":
    import sys

    configure_logging()
    asyncio.run(init_db(drop_existing="--drop" in sys.argv[1:]))
