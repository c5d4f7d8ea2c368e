#!/usr/bin/env python
"""
Script to check that the database is reachable and holds the platform tables.

Usage:
    python -m scripts.check_database
"""

import asyncio
import sys
import logging
from typing import List

from sqlalchemy import inspect, text
from sqlalchemy.ext.asyncio import create_async_engine

from app.config import get_settings
from app.models import Base

# Configuration
MAX_RETRIES = 5
RETRY_DELAY = 3  # seconds

logger = logging.getLogger("check_database")


def missing_tables(sync_conn) -> List[str]:
    existing = set(inspect(sync_conn).get_table_names())
    return [name for name in Base.metadata.tables if name not in existing]


async def check_database() -> bool:
    """Retry the connection a few times, then verify the schema."""
    database_url = get_settings().DATABASE_URL
    logger.info(f"Checking database at {database_url}")
    engine = create_async_engine(database_url)

    try:
        for attempt in range(MAX_RETRIES):
            try:
                async with engine.connect() as conn:
                    await conn.execute(text("SELECT 1"))
                    missing = await conn.run_sync(missing_tables)
                break
            except Exception as e:
                logger.warning(f"Connection attempt {attempt + 1}/{MAX_RETRIES} failed: {str(e)}")
                if attempt == MAX_RETRIES - 1:
                    logger.error("Check DATABASE_URL and that the database server is running")
                    return False
                await asyncio.sleep(RETRY_DELAY)
    finally:
        await engine.dispose()

    if missing:
        logger.error(f"Missing tables: {', '.join(missing)} (run `alembic upgrade head`)")
        return False

    logger.info("Database is reachable and all tables exist")
    return True


async def main():
    # Configure logging
    logging.basicConfig(level=logging.INFO)

    result = await check_database()
    return 0 if result else 1

if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
