import logging

import asyncpg
import pytest
import pytest_asyncio

from roster.repositories.schema import apply_schema

logging.basicConfig(
    level=logging.INFO, format="%(asctime)s [%(levelname)s] %(message)s"
)
logger = logging.getLogger(__name__)


# ------------------------
# PostgreSQL container, shared by all repository tests
# ------------------------
@pytest.fixture(scope="session")
def postgres_dsn():
    try:
        from testcontainers.postgres import PostgresContainer

        container = PostgresContainer("postgres:15", driver=None)
        container.start()
    except Exception as e:
        pytest.skip(f"Docker is not available for PostgreSQL container: {e}")

    dsn = container.get_connection_url().replace("+psycopg2", "")
    logger.info(f"PostgreSQL container DSN: {dsn}")
    yield dsn
    logger.info("Stopping PostgreSQL container...")
    container.stop()


# ------------------------
# Pool per test, clean tables
# ------------------------
@pytest_asyncio.fixture
async def pool(postgres_dsn):
    pool = await asyncpg.create_pool(dsn=postgres_dsn, min_size=1, max_size=5)
    await apply_schema(pool)
    yield pool
    async with pool.acquire() as conn:
        await conn.execute("TRUNCATE TABLE players, teams, user_roles, users CASCADE;")
    await pool.close()
