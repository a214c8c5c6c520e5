"""
PostgreSQL repository adapter - Implements the CredentialStore protocol.

This module provides the PostgreSQL implementation of the domain's
credential store port using psycopg3 with raw SQL.

Atomicity:
----------
Registration writes the user row and its first verification code inside a
single transaction (conn.transaction()). If either INSERT fails the
transaction rolls back, so a user without a code or a code without a user
is never observable.

Uniqueness:
-----------
The domain checks email/username availability before inserting, but two
concurrent registrations can both pass that check. The UNIQUE constraints
on users.email and users.username are the final arbiter: the losing insert
raises UniqueViolation, which is surfaced as a ConflictError after the
rollback.
"""

import logging
from datetime import datetime
from pathlib import Path
from typing import Any

from psycopg import errors
from psycopg_pool import ConnectionPool

from src.domain.access import Role
from src.domain.exceptions import ConflictError
from src.domain.ports import NewUser, User, VerificationRecord

logger = logging.getLogger(__name__)

_USER_COLUMNS = "id, full_name, username, email, password, image, role, email_verified_at"


def _row_to_user(row: tuple[Any, ...]) -> User:
    return User(
        id=row[0],
        fullname=row[1],
        username=row[2],
        email=row[3],
        password_hash=row[4],
        image=row[5],
        role=Role(row[6]),
        email_verified_at=row[7],
    )


class PostgresCredentialStore:
    """
    Implements CredentialStore protocol via psycopg3.

    Uses structural subtyping - no explicit inheritance from Protocol.
    All SQL uses parameterized queries for security.
    """

    def __init__(self, pool: ConnectionPool) -> None:
        """
        Initialize store with connection pool.

        Args:
            pool: psycopg3 ConnectionPool for database connections
        """
        self._pool = pool

    def find_user_by_email(self, email: str) -> User | None:
        sql = f"SELECT {_USER_COLUMNS} FROM users WHERE email = %s"

        with self._pool.connection() as conn, conn.cursor() as cursor:
            cursor.execute(sql, (email,))
            row = cursor.fetchone()

        return _row_to_user(row) if row is not None else None

    def find_user_by_id(self, user_id: int) -> User | None:
        sql = f"SELECT {_USER_COLUMNS} FROM users WHERE id = %s"

        with self._pool.connection() as conn, conn.cursor() as cursor:
            cursor.execute(sql, (user_id,))
            row = cursor.fetchone()

        return _row_to_user(row) if row is not None else None

    def email_exists(self, email: str) -> bool:
        return self._exists("SELECT EXISTS (SELECT 1 FROM users WHERE email = %s)", (email,))

    def username_exists(self, username: str) -> bool:
        return self._exists(
            "SELECT EXISTS (SELECT 1 FROM users WHERE username = %s)", (username,)
        )

    def code_exists(self, code: str) -> bool:
        return self._exists(
            "SELECT EXISTS (SELECT 1 FROM verification_codes WHERE code = %s)", (code,)
        )

    def create_user_with_code(
        self, user: NewUser, code: str, expired_at: datetime | None
    ) -> int:
        """
        Insert a user and its first verification code in one transaction.

        Args:
            user: Values for the new user row (password already hashed)
            code: First verification code
            expired_at: Code expiry, or None for a code that never expires

        Returns:
            The new user's id

        Raises:
            ConflictError: If a concurrent registration claimed the email or username
        """
        user_sql = """
            INSERT INTO users (full_name, username, email, password, role)
            VALUES (%s, %s, %s, %s, %s)
            RETURNING id
        """
        code_sql = """
            INSERT INTO verification_codes (user_id, code, expired_at)
            VALUES (%s, %s, %s)
        """

        with self._pool.connection() as conn:
            try:
                with conn.transaction(), conn.cursor() as cursor:
                    cursor.execute(
                        user_sql,
                        (
                            user.fullname,
                            user.username,
                            user.email,
                            user.password_hash,
                            user.role.value,
                        ),
                    )
                    user_id = cursor.fetchone()[0]
                    cursor.execute(code_sql, (user_id, code, expired_at))
            except errors.UniqueViolation as e:
                constraint = (e.diag.constraint_name or "").lower()
                logger.warning("Registration insert lost a uniqueness race on %s", constraint)
                if "username" in constraint:
                    raise ConflictError.for_field("User", "username", user.username) from None
                raise ConflictError.for_field("User", "email", user.email) from None

        return user_id

    def add_verification_code(
        self, user_id: int, code: str, expired_at: datetime | None
    ) -> None:
        sql = """
            INSERT INTO verification_codes (user_id, code, expired_at)
            VALUES (%s, %s, %s)
        """

        with self._pool.connection() as conn, conn.cursor() as cursor:
            cursor.execute(sql, (user_id, code, expired_at))
            conn.commit()

    def find_verification_record(
        self, user_id: int, code: str, unverified_only: bool = True
    ) -> VerificationRecord | None:
        """
        Find the newest record matching both user and code.

        With unverified_only the owning user must still have
        email_verified_at NULL.
        """
        sql = """
            SELECT vc.code, vc.user_id, vc.created_at, vc.expired_at
            FROM verification_codes vc
            INNER JOIN users u ON u.id = vc.user_id
            WHERE vc.user_id = %s AND vc.code = %s
        """
        if unverified_only:
            sql += " AND u.email_verified_at IS NULL"
        sql += " ORDER BY vc.created_at DESC LIMIT 1"

        with self._pool.connection() as conn, conn.cursor() as cursor:
            cursor.execute(sql, (user_id, code))
            row = cursor.fetchone()

        if row is None:
            return None
        return VerificationRecord(code=row[0], user_id=row[1], created_at=row[2], expired_at=row[3])

    def mark_user_verified(self, user_id: int, verified_at: datetime) -> None:
        sql = "UPDATE users SET email_verified_at = %s, updated_at = NOW() WHERE id = %s"

        with self._pool.connection() as conn, conn.cursor() as cursor:
            cursor.execute(sql, (verified_at, user_id))
            conn.commit()

    def _exists(self, sql: str, params: tuple[Any, ...]) -> bool:
        with self._pool.connection() as conn, conn.cursor() as cursor:
            cursor.execute(sql, params)
            return bool(cursor.fetchone()[0])


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
