"""
Shared fixtures for adversarial tests.

Provides common test infrastructure for concurrency attacks against the
credential store.
"""

from collections.abc import Generator

import pytest
from psycopg_pool import ConnectionPool

from src.adapters.repository.postgres import PostgresCredentialStore
from src.domain.ports import NewUser


@pytest.fixture
def store(pool: ConnectionPool) -> PostgresCredentialStore:
    """Create store instance for each test."""
    return PostgresCredentialStore(pool)


@pytest.fixture(autouse=True)
def clean_tables(clean_database: None) -> Generator[None, None, None]:
    """Every adversarial test starts from empty tables."""
    yield


def attacker(email: str, username: str) -> NewUser:
    """Registration values submitted by a concurrent request."""
    return NewUser(
        fullname="Attacker",
        username=username,
        email=email,
        password_hash="$2b$04$attackhash",
    )
