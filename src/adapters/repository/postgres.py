"""
PostgreSQL repository adapters - Implement the domain's persistence ports.

This module provides the PostgreSQL implementations of IdentityRepository,
DataRequestRepository and ReportRepository using psycopg3 with raw SQL.

Concurrency Design - Compare-and-Set Code Consumption:
-----------------------------------------------------
Every method is a single SQL statement. The statements that consume a
one-time code repeat the validity predicate in their WHERE clause:

    WHERE id = %s AND otp = %s AND otp_expires_at > %s

Under READ COMMITTED, a second concurrent UPDATE on the same row waits for
the first to commit and then re-evaluates its WHERE clause against the new
row version. The first UPDATE has already nulled `otp`, so the second
matches zero rows. Exactly one of two racing verifications succeeds.
"""

import logging
from datetime import datetime
from pathlib import Path

from psycopg.errors import ForeignKeyViolation, UniqueViolation
from psycopg_pool import ConnectionPool

from src.domain.exceptions import Conflict, NotFound
from src.domain.ports import (
    DataRequest,
    GrievanceReport,
    Identity,
    NewIdentity,
    ProfileUpdate,
    Role,
    SuspiciousEntityReport,
)

logger = logging.getLogger(__name__)

_IDENTITY_COLUMNS = """
    id, full_name, aadhaar_number, phone_number, email, address, role,
    password_hash, is_verified, otp, otp_expires_at, created_at, updated_at
"""

_DATA_REQUEST_COLUMNS = """
    id, officer_id, request_type, target_entity, justification, urgency, status, created_at
"""


def _row_to_identity(row: tuple) -> Identity:
    return Identity(
        id=row[0],
        full_name=row[1],
        aadhaar_number=row[2],
        phone_number=row[3],
        email=row[4],
        address=row[5],
        role=Role(row[6]),
        password_hash=row[7],
        is_verified=row[8],
        otp=row[9],
        otp_expires_at=row[10],
        created_at=row[11],
        updated_at=row[12],
    )


class PostgresIdentityRepository:
    """
    Implements IdentityRepository protocol via psycopg3.

    Uses structural subtyping - no explicit inheritance from Protocol.
    All SQL uses parameterized queries for security.
    """

    def __init__(self, pool: ConnectionPool) -> None:
        """
        Initialize repository with connection pool.

        Args:
            pool: psycopg3 ConnectionPool for database connections
        """
        self._pool = pool

    def create(
        self, identity_id: str, identity: NewIdentity, code: str, code_expires_at: datetime
    ) -> bool:
        """
        Insert a new identity together with its first one-time code.

        ON CONFLICT DO NOTHING without a target covers all three UNIQUE
        constraints (aadhaar_number, email, phone_number), so concurrent
        registrations of the same claim resolve to exactly one insert.

        Returns:
            True if inserted, False if any unique attribute already exists
        """
        sql = """
            INSERT INTO identities
                (id, full_name, aadhaar_number, phone_number, email, address, role,
                 otp, otp_expires_at)
            VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s)
            ON CONFLICT DO NOTHING
        """

        with self._pool.connection() as conn, conn.cursor() as cursor:
            cursor.execute(
                sql,
                (
                    identity_id,
                    identity.full_name,
                    identity.aadhaar_number,
                    identity.phone_number,
                    identity.email,
                    identity.address,
                    identity.role.value,
                    code,
                    code_expires_at,
                ),
            )
            conn.commit()
            return cursor.rowcount == 1

    def find_by_id(self, identity_id: str) -> Identity | None:
        sql = f"SELECT {_IDENTITY_COLUMNS} FROM identities WHERE id = %s"

        with self._pool.connection() as conn, conn.cursor() as cursor:
            cursor.execute(sql, (identity_id,))
            row = cursor.fetchone()

        return _row_to_identity(row) if row is not None else None

    def find_verified_by_id(self, identity_id: str, role: Role | None = None) -> Identity | None:
        sql = f"""
            SELECT {_IDENTITY_COLUMNS} FROM identities
            WHERE id = %s AND is_verified = TRUE AND (%s::text IS NULL OR role = %s)
        """
        role_value = role.value if role is not None else None

        with self._pool.connection() as conn, conn.cursor() as cursor:
            cursor.execute(sql, (identity_id, role_value, role_value))
            row = cursor.fetchone()

        return _row_to_identity(row) if row is not None else None

    def set_secret_and_verify(
        self, identity_id: str, code: str, secret_hash: str, now: datetime
    ) -> bool:
        sql = """
            UPDATE identities
            SET password_hash = %s,
                is_verified = TRUE,
                otp = NULL,
                otp_expires_at = NULL,
                updated_at = NOW()
            WHERE id = %s
              AND is_verified = FALSE
              AND otp = %s
              AND otp_expires_at > %s
        """

        with self._pool.connection() as conn, conn.cursor() as cursor:
            cursor.execute(sql, (secret_hash, identity_id, code, now))
            conn.commit()
            return cursor.rowcount == 1

    def set_code(self, identity_id: str, code: str, expires_at: datetime) -> bool:
        sql = """
            UPDATE identities
            SET otp = %s, otp_expires_at = %s, updated_at = NOW()
            WHERE id = %s
        """

        with self._pool.connection() as conn, conn.cursor() as cursor:
            cursor.execute(sql, (code, expires_at, identity_id))
            conn.commit()
            return cursor.rowcount == 1

    def clear_code(self, identity_id: str, code: str, now: datetime) -> Identity | None:
        sql = f"""
            UPDATE identities
            SET otp = NULL, otp_expires_at = NULL, updated_at = NOW()
            WHERE id = %s
              AND is_verified = TRUE
              AND otp = %s
              AND otp_expires_at > %s
            RETURNING {_IDENTITY_COLUMNS}
        """

        with self._pool.connection() as conn, conn.cursor() as cursor:
            cursor.execute(sql, (identity_id, code, now))
            row = cursor.fetchone()
            conn.commit()

        return _row_to_identity(row) if row is not None else None

    def update_profile(self, identity_id: str, update: ProfileUpdate) -> Identity | None:
        """
        Replace contact fields of an identity.

        Raises:
            Conflict: If the new email or phone number violates a UNIQUE constraint
        """
        sql = f"""
            UPDATE identities
            SET full_name = %s, email = %s, phone_number = %s, address = %s,
                updated_at = NOW()
            WHERE id = %s
            RETURNING {_IDENTITY_COLUMNS}
        """

        try:
            with self._pool.connection() as conn, conn.cursor() as cursor:
                cursor.execute(
                    sql,
                    (
                        update.full_name,
                        update.email,
                        update.phone_number,
                        update.address,
                        identity_id,
                    ),
                )
                row = cursor.fetchone()
                conn.commit()
        except UniqueViolation:
            raise Conflict(identity_id) from None

        return _row_to_identity(row) if row is not None else None


class PostgresDataRequestRepository:
    """Implements DataRequestRepository protocol via psycopg3."""

    def __init__(self, pool: ConnectionPool) -> None:
        self._pool = pool

    def add(self, request: DataRequest) -> None:
        sql = """
            INSERT INTO data_requests
                (id, officer_id, request_type, target_entity, justification, urgency, status)
            VALUES (%s, %s, %s, %s, %s, %s, %s)
        """

        with self._pool.connection() as conn:
            conn.execute(
                sql,
                (
                    request.id,
                    request.officer_id,
                    request.request_type,
                    request.target_entity,
                    request.justification,
                    request.urgency,
                    request.status,
                ),
            )
            conn.commit()

    def list_recent(self) -> list[DataRequest]:
        sql = f"SELECT {_DATA_REQUEST_COLUMNS} FROM data_requests ORDER BY created_at DESC"

        with self._pool.connection() as conn, conn.cursor() as cursor:
            cursor.execute(sql)
            rows = cursor.fetchall()

        return [DataRequest(*row) for row in rows]


class PostgresReportRepository:
    """
    Implements ReportRepository protocol via psycopg3.

    The filer must exist: the foreign key on user_id surfaces as NotFound.
    """

    def __init__(self, pool: ConnectionPool) -> None:
        self._pool = pool

    def add_grievance(self, report: GrievanceReport) -> None:
        sql = """
            INSERT INTO reports
                (id, user_id, category, subcategory, description, location, anonymous,
                 status, priority)
            VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s)
        """

        try:
            with self._pool.connection() as conn:
                conn.execute(
                    sql,
                    (
                        report.id,
                        report.user_id,
                        report.category,
                        report.subcategory,
                        report.description,
                        report.location,
                        report.anonymous,
                        report.status,
                        report.priority,
                    ),
                )
                conn.commit()
        except ForeignKeyViolation:
            raise NotFound(report.user_id) from None

    def add_suspicious_entity(self, report: SuspiciousEntityReport) -> None:
        sql = """
            INSERT INTO suspicious_entities
                (id, user_id, entity_type, entity_value, description, status)
            VALUES (%s, %s, %s, %s, %s, %s)
        """

        try:
            with self._pool.connection() as conn:
                conn.execute(
                    sql,
                    (
                        report.id,
                        report.user_id,
                        report.entity_type,
                        report.entity_value,
                        report.description,
                        report.status,
                    ),
                )
                conn.commit()
        except ForeignKeyViolation:
            raise NotFound(report.user_id) from None


def run_migrations(pool: ConnectionPool) -> None:
    """
    Execute all SQL migration files from the migrations directory.

    Migrations are executed in sorted order (alphabetically by filename).
    Each migration should be idempotent (use IF NOT EXISTS, etc.).

    Args:
        pool: psycopg3 ConnectionPool instance
    """
    # Structure: src/adapters/repository/postgres.py -> migrations/
    migrations_dir = Path(__file__).parent.parent.parent.parent / "migrations"

    if not migrations_dir.exists():
        logger.warning(f"Migrations directory not found: {migrations_dir}")
        return

    sql_files = sorted(migrations_dir.glob("*.sql"))

    if not sql_files:
        logger.info("No migration files found")
        return

    logger.info(f"Running {len(sql_files)} migration(s)")

    for sql_file in sql_files:
        logger.info(f"Executing migration: {sql_file.name}")
        try:
            sql_content = sql_file.read_text()

            with pool.connection() as conn:
                conn.execute(sql_content)

            logger.info(f"Migration complete: {sql_file.name}")
        except Exception as e:
            logger.error(f"Migration failed: {sql_file.name} - {e}")
            raise RuntimeError(f"Database migration failed: {sql_file.name}") from e
