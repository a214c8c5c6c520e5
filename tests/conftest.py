"""
Shared test fixtures and configuration.

This module provides pytest fixtures for:
- Identity configuration with a fast bcrypt cost
- An in-memory credential store for workflow scenarios
- PostgreSQL connection pool (skipped when the database is unreachable)
"""

from collections.abc import Generator
from dataclasses import replace
from datetime import datetime, timezone

import pytest
from psycopg_pool import ConnectionPool, PoolTimeout

from src.adapters.repository.postgres import run_migrations
from src.config.settings import get_settings
from src.domain.config import IdentityConfig
from src.domain.ports import NewUser, User, VerificationRecord

FIXED_NOW = datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc)


class InMemoryCredentialStore:
    """CredentialStore fake keeping rows in dictionaries."""

    def __init__(self) -> None:
        self.users: dict[int, User] = {}
        self.records: list[VerificationRecord] = []
        self._next_id = 1

    def find_user_by_email(self, email: str) -> User | None:
        return next((u for u in self.users.values() if u.email == email), None)

    def find_user_by_id(self, user_id: int) -> User | None:
        return self.users.get(user_id)

    def email_exists(self, email: str) -> bool:
        return self.find_user_by_email(email) is not None

    def username_exists(self, username: str) -> bool:
        return any(u.username == username for u in self.users.values())

    def create_user_with_code(self, user: NewUser, code: str, expired_at: datetime | None) -> int:
        user_id = self._next_id
        self._next_id += 1
        self.users[user_id] = User(
            id=user_id,
            fullname=user.fullname,
            username=user.username,
            email=user.email,
            password_hash=user.password_hash,
            role=user.role,
        )
        self.records.append(
            VerificationRecord(
                code=code, user_id=user_id, created_at=FIXED_NOW, expired_at=expired_at
            )
        )
        return user_id

    def add_verification_code(self, user_id: int, code: str, expired_at: datetime | None) -> None:
        self.records.append(
            VerificationRecord(
                code=code, user_id=user_id, created_at=FIXED_NOW, expired_at=expired_at
            )
        )

    def code_exists(self, code: str) -> bool:
        return any(r.code == code for r in self.records)

    def find_verification_record(
        self, user_id: int, code: str, unverified_only: bool = True
    ) -> VerificationRecord | None:
        user = self.users.get(user_id)
        if user is None or (unverified_only and user.is_verified):
            return None
        matches = [r for r in self.records if r.user_id == user_id and r.code == code]
        return matches[-1] if matches else None

    def mark_user_verified(self, user_id: int, verified_at: datetime) -> None:
        self.users[user_id] = replace(self.users[user_id], email_verified_at=verified_at)

    def records_for(self, user_id: int) -> list[VerificationRecord]:
        return [r for r in self.records if r.user_id == user_id]


@pytest.fixture
def identity_config() -> IdentityConfig:
    """Identity configuration with the minimum bcrypt cost for fast tests."""
    return IdentityConfig(signing_key="test-signing-key", bcrypt_cost=4)


@pytest.fixture
def memory_store() -> InMemoryCredentialStore:
    return InMemoryCredentialStore()


@pytest.fixture(scope="session")
def pool() -> Generator[ConnectionPool, None, None]:
    """
    Connection pool for tests that need PostgreSQL.

    Skips the requesting test when the database cannot be reached.
    """
    settings = get_settings()
    pool = ConnectionPool(
        conninfo=settings.database_url,
        min_size=1,
        max_size=20,
        open=False,
    )
    try:
        pool.open(wait=True, timeout=3)
    except PoolTimeout:
        pool.close()
        pytest.skip("PostgreSQL is not reachable")

    run_migrations(pool)
    yield pool
    pool.close()


@pytest.fixture
def clean_database(pool: ConnectionPool) -> Generator[None, None, None]:
    """Empty all tables before each database test."""
    with pool.connection() as conn:
        conn.execute("TRUNCATE users, verification_codes, playlists RESTART IDENTITY CASCADE")
        conn.commit()
    yield
