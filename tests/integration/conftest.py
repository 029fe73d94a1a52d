"""
Shared fixtures for integration tests.

Database tests need a reachable PostgreSQL at DATABASE_URL; they are
skipped when none answers.
"""

from collections.abc import Generator

import pytest
from psycopg_pool import ConnectionPool, PoolTimeout

from src.adapters.repository.postgres import run_migrations
from src.config.settings import get_settings


def open_test_pool() -> ConnectionPool:
    """Open a pool on DATABASE_URL with migrations applied, or skip."""
    pool = ConnectionPool(
        conninfo=get_settings().database_url,
        min_size=1,
        max_size=10,
        open=True,
    )
    try:
        pool.wait(timeout=5.0)
    except PoolTimeout:
        pool.close()
        pytest.skip("PostgreSQL not reachable at DATABASE_URL")
    run_migrations(pool)
    return pool


@pytest.fixture(scope="module")
def pool() -> Generator[ConnectionPool, None, None]:
    pool = open_test_pool()
    yield pool
    pool.close()


@pytest.fixture
def clean_database(pool: ConnectionPool) -> Generator[None, None, None]:
    """Empty every table before the test, dependents first."""
    with pool.connection() as conn:
        conn.execute("DELETE FROM reports")
        conn.execute("DELETE FROM suspicious_entities")
        conn.execute("DELETE FROM data_requests")
        conn.execute("DELETE FROM identities")
        conn.commit()
    yield
