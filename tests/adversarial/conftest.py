"""
Shared fixtures for adversarial tests.

Provides common test infrastructure for race condition, brute force and
timing tests. Database-backed tests skip when PostgreSQL is unreachable.
"""

from collections.abc import Generator
from datetime import datetime, timedelta, timezone

import bcrypt
import pytest
from psycopg_pool import ConnectionPool, PoolTimeout

from src.adapters.repository.postgres import PostgresIdentityRepository, run_migrations
from src.config.settings import get_settings
from src.domain.ports import NewIdentity, Role

# Module-level marker for all adversarial tests
pytestmark = pytest.mark.adversarial


@pytest.fixture(scope="module")
def pool() -> Generator[ConnectionPool, None, None]:
    """Create connection pool for adversarial tests."""
    settings = get_settings()
    pool = ConnectionPool(
        conninfo=settings.database_url,
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
    yield pool
    pool.close()


@pytest.fixture
def repository(pool: ConnectionPool) -> PostgresIdentityRepository:
    """Create repository instance for each test."""
    return PostgresIdentityRepository(pool)


@pytest.fixture
def clean_database(pool: ConnectionPool) -> Generator[None, None, None]:
    """Clean every table before each test, dependents first."""
    with pool.connection() as conn:
        conn.execute("DELETE FROM reports")
        conn.execute("DELETE FROM suspicious_entities")
        conn.execute("DELETE FROM data_requests")
        conn.execute("DELETE FROM identities")
        conn.commit()
    yield


def claim(n: int = 0, role: Role = Role.USER) -> NewIdentity:
    """Identity claim whose unique fields are derived from `n`."""
    return NewIdentity(
        full_name=f"Target {n}",
        aadhaar_number=f"{100000000000 + n}",
        phone_number=f"+9198{n:08d}",
        email=f"target{n}@example.com",
        address="1 Test Street",
        role=role,
    )


def create_pending_identity(pool: ConnectionPool, identity_id: str, code: str, n: int = 0) -> None:
    """Helper to create an identity awaiting its registration code."""
    expires = datetime.now(timezone.utc) + timedelta(minutes=10)
    assert PostgresIdentityRepository(pool).create(identity_id, claim(n), code, expires)


def create_verified_identity(
    pool: ConnectionPool, identity_id: str, password: str, n: int = 0
) -> None:
    """Helper to create a verified identity with a bcrypt secret."""
    password_hash = bcrypt.hashpw(password.encode(), bcrypt.gensalt(10)).decode()
    create_pending_identity(pool, identity_id, "000000", n)
    assert PostgresIdentityRepository(pool).set_secret_and_verify(
        identity_id, "000000", password_hash, datetime.now(timezone.utc)
    )


@pytest.fixture
def make_claim():
    """Factory for distinct identity claims: make_claim(n, role=...)."""
    return claim


@pytest.fixture
def pending_identity(pool: ConnectionPool):
    """Factory: pending_identity(identity_id, code, n=0)."""

    def create(identity_id: str, code: str, n: int = 0) -> None:
        create_pending_identity(pool, identity_id, code, n)

    return create


@pytest.fixture
def verified_identity(pool: ConnectionPool):
    """Factory: verified_identity(identity_id, password, n=0)."""

    def create(identity_id: str, password: str, n: int = 0) -> None:
        create_verified_identity(pool, identity_id, password, n)

    return create
