"""
PostgreSQL repository adapter - Implements VerificationRepository protocol.

This module provides the PostgreSQL implementation of the domain's
repository port using psycopg3 with raw SQL.

Concurrency Design - No Lost Updates:
-------------------------------------
The domain service reads a snapshot and then asks for a transition.
Both transitions are single conditional UPDATE statements:

1. **record_failed_attempt**: ``attempts = attempts + 1`` evaluated by the
   database, guarded by ``NOT is_verified AND attempts < max``. Two
   concurrent wrong codes produce two increments, never one, and the
   counter cannot pass the limit.

2. **mark_verified**: guarded by ``NOT is_verified`` plus the attempt and
   expiry conditions, so exactly one of several concurrent correct
   submissions flips the flag.

``RETURNING`` reports whether the guard held; an empty result means a
concurrent request won and the service re-reads the record.
"""

import logging
from datetime import datetime
from pathlib import Path
from uuid import UUID

import psycopg
from psycopg_pool import ConnectionPool

from src.domain.exceptions import PersistenceError
from src.domain.ports import ContactType, VerificationRequest

logger = logging.getLogger(__name__)

_COLUMNS = "id, contact, contact_type, code, is_verified, attempts, expires_at, verified_at, created_at"


def _to_request(row: tuple) -> VerificationRequest:
    return VerificationRequest(
        id=row[0],
        contact=row[1],
        contact_type=ContactType(row[2]),
        code=row[3],
        is_verified=row[4],
        attempts=row[5],
        expires_at=row[6],
        verified_at=row[7],
        created_at=row[8],
    )


class PostgresVerificationRepository:
    """
    Implements VerificationRepository protocol via psycopg3.

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
        self,
        contact: str,
        contact_type: ContactType,
        code: str,
        expires_at: datetime | None,
    ) -> VerificationRequest:
        """
        Insert a new pending verification request.

        The id is assigned by the database (gen_random_uuid()).

        Raises:
            PersistenceError: If the insert fails or the pool is exhausted
        """
        sql = f"""
            INSERT INTO verification_requests (contact, contact_type, code, expires_at)
            VALUES (%s, %s, %s, %s)
            RETURNING {_COLUMNS}
        """

        try:
            with self._pool.connection() as conn, conn.cursor() as cursor:
                cursor.execute(sql, (contact, contact_type.value, code, expires_at))
                row = cursor.fetchone()
                conn.commit()
        except psycopg.Error as e:
            logger.error("Failed to insert verification request: %s", e)
            raise PersistenceError("Failed to create verification request") from e

        return _to_request(row)

    def get(self, verification_id: UUID) -> VerificationRequest | None:
        sql = f"SELECT {_COLUMNS} FROM verification_requests WHERE id = %s"

        try:
            with self._pool.connection() as conn, conn.cursor() as cursor:
                cursor.execute(sql, (verification_id,))
                row = cursor.fetchone()
        except psycopg.Error as e:
            logger.error("Failed to fetch verification request %s: %s", verification_id, e)
            raise PersistenceError("Failed to fetch verification request") from e

        return _to_request(row) if row is not None else None

    def find_pending(self, contact: str, contact_type: ContactType) -> VerificationRequest | None:
        """
        Lookup-by-contact path: newest unverified request for the contact.

        Served by the partial index on (contact, contact_type, created_at).
        """
        sql = f"""
            SELECT {_COLUMNS}
            FROM verification_requests
            WHERE contact = %s
              AND contact_type = %s
              AND is_verified = FALSE
            ORDER BY created_at DESC
            LIMIT 1
        """

        try:
            with self._pool.connection() as conn, conn.cursor() as cursor:
                cursor.execute(sql, (contact, contact_type.value))
                row = cursor.fetchone()
        except psycopg.Error as e:
            logger.error("Failed to look up pending verification request: %s", e)
            raise PersistenceError("Failed to fetch verification request") from e

        return _to_request(row) if row is not None else None

    def record_failed_attempt(self, verification_id: UUID, max_attempts: int) -> int | None:
        """
        Increment attempts in the database, guarded by the open-request condition.

        Returns:
            New attempts value, or None if the request was already closed
        """
        sql = """
            UPDATE verification_requests
            SET attempts = attempts + 1
            WHERE id = %s
              AND is_verified = FALSE
              AND attempts < %s
            RETURNING attempts
        """

        try:
            with self._pool.connection() as conn, conn.cursor() as cursor:
                cursor.execute(sql, (verification_id, max_attempts))
                row = cursor.fetchone()
                conn.commit()
        except psycopg.Error as e:
            logger.error("Failed to record attempt for %s: %s", verification_id, e)
            raise PersistenceError("Failed to update verification request") from e

        return row[0] if row is not None else None

    def mark_verified(
        self, verification_id: UUID, now: datetime, max_attempts: int
    ) -> datetime | None:
        """
        Flip is_verified exactly once.

        Returns:
            verified_at if this call performed the transition, else None
        """
        sql = """
            UPDATE verification_requests
            SET is_verified = TRUE, verified_at = %s
            WHERE id = %s
              AND is_verified = FALSE
              AND attempts < %s
              AND (expires_at IS NULL OR expires_at > %s)
            RETURNING verified_at
        """

        try:
            with self._pool.connection() as conn, conn.cursor() as cursor:
                cursor.execute(sql, (now, verification_id, max_attempts, now))
                row = cursor.fetchone()
                conn.commit()
        except psycopg.Error as e:
            logger.error("Failed to mark %s verified: %s", verification_id, e)
            raise PersistenceError("Failed to verify code") from e

        return row[0] if row is not None else None

    def ping(self) -> None:
        try:
            with self._pool.connection() as conn:
                conn.execute("SELECT 1")
        except psycopg.Error as e:
            raise PersistenceError("Database unavailable") from e


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
        logger.warning("Migrations directory not found: %s", migrations_dir)
        return

    sql_files = sorted(migrations_dir.glob("*.sql"))

    if not sql_files:
        logger.info("No migration files found")
        return

    logger.info("Running %d migration(s)", len(sql_files))

    for sql_file in sql_files:
        logger.info("Executing migration: %s", sql_file.name)
        try:
            sql_content = sql_file.read_text()

            with pool.connection() as conn:
                conn.execute(sql_content)

            logger.info("Migration complete: %s", sql_file.name)
        except Exception as e:
            logger.error("Migration failed: %s - %s", sql_file.name, e)
            raise RuntimeError(f"Database migration failed: {sql_file.name}") from e
