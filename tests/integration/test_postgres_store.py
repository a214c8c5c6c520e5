"""
Integration tests for PostgresCredentialStore.

Tests store operations against a real PostgreSQL database.
Skipped when PostgreSQL is not reachable.
"""

from datetime import timedelta

import pytest
from psycopg import errors
from psycopg_pool import ConnectionPool

from src.adapters.repository.postgres import PostgresCredentialStore
from src.domain.access import Role
from src.domain.exceptions import ConflictError
from src.domain.ports import NewUser
from tests.conftest import FIXED_NOW

pytestmark = [pytest.mark.integration, pytest.mark.usefixtures("clean_database")]


@pytest.fixture
def store(pool: ConnectionPool) -> PostgresCredentialStore:
    """Create store instance for each test."""
    return PostgresCredentialStore(pool)


def new_user(email: str = "ana@x.com", username: str = "ana1") -> NewUser:
    return NewUser(
        fullname="Ana",
        username=username,
        email=email,
        password_hash="$2b$04$notarealhashbutlongenough",
    )


def count_rows(pool: ConnectionPool, table: str) -> int:
    with pool.connection() as conn:
        return conn.execute(f"SELECT COUNT(*) FROM {table}").fetchone()[0]


class TestCreateUserWithCode:
    """Tests for create_user_with_code method."""

    def test_creates_user_and_code(self, store: PostgresCredentialStore) -> None:
        """User row and first code are both persisted."""
        user_id = store.create_user_with_code(new_user(), "04821", None)

        user = store.find_user_by_id(user_id)
        assert user is not None
        assert user.email == "ana@x.com"
        assert user.fullname == "Ana"
        assert user.role is Role.MEMBER
        assert user.is_verified is False
        assert store.code_exists("04821")

    def test_duplicate_email_raises_conflict(self, store: PostgresCredentialStore) -> None:
        """The unique constraint on email surfaces as ConflictError."""
        store.create_user_with_code(new_user(), "04821", None)

        with pytest.raises(ConflictError) as exc_info:
            store.create_user_with_code(new_user(username="ana2"), "11111", None)

        assert exc_info.value.message == "User with email 'ana@x.com' already exists."

    def test_duplicate_username_raises_conflict(self, store: PostgresCredentialStore) -> None:
        """The unique constraint on username surfaces as ConflictError."""
        store.create_user_with_code(new_user(), "04821", None)

        with pytest.raises(ConflictError) as exc_info:
            store.create_user_with_code(new_user(email="bob@x.com"), "11111", None)

        assert "username 'ana1'" in exc_info.value.message

    def test_failed_code_insert_leaves_no_user(
        self, store: PostgresCredentialStore, pool: ConnectionPool
    ) -> None:
        """If the code insert fails, the user insert is rolled back."""
        with pytest.raises(errors.StringDataRightTruncation):
            store.create_user_with_code(new_user(), "0" * 11, None)

        assert store.email_exists("ana@x.com") is False
        assert count_rows(pool, "users") == 0
        assert count_rows(pool, "verification_codes") == 0


class TestLookups:
    """Tests for existence checks and user lookups."""

    def test_exists_checks(self, store: PostgresCredentialStore) -> None:
        """email/username/code existence reflect stored rows."""
        assert store.email_exists("ana@x.com") is False
        assert store.username_exists("ana1") is False
        assert store.code_exists("04821") is False

        store.create_user_with_code(new_user(), "04821", None)

        assert store.email_exists("ana@x.com") is True
        assert store.username_exists("ana1") is True
        assert store.code_exists("04821") is True

    def test_find_user_by_email_missing(self, store: PostgresCredentialStore) -> None:
        """Unknown email returns None."""
        assert store.find_user_by_email("bob@x.com") is None

    def test_find_user_by_id_missing(self, store: PostgresCredentialStore) -> None:
        """Unknown id returns None."""
        assert store.find_user_by_id(999) is None


class TestVerificationRecords:
    """Tests for verification record storage."""

    def test_record_found_for_matching_user_and_code(
        self, store: PostgresCredentialStore
    ) -> None:
        """A record matches on both user and code."""
        expiry = FIXED_NOW + timedelta(minutes=10)
        user_id = store.create_user_with_code(new_user(), "04821", expiry)

        record = store.find_verification_record(user_id, "04821")

        assert record is not None
        assert record.user_id == user_id
        assert record.expired_at == expiry

    def test_code_of_another_user_not_found(self, store: PostgresCredentialStore) -> None:
        """A code issued to someone else does not match."""
        ana = store.create_user_with_code(new_user(), "04821", None)
        bob = store.create_user_with_code(new_user("bob@x.com", "bob1"), "11111", None)

        assert store.find_verification_record(bob, "04821") is None
        assert store.find_verification_record(ana, "04821") is not None

    def test_added_codes_accumulate(self, store: PostgresCredentialStore) -> None:
        """Earlier codes stay findable after another is added."""
        user_id = store.create_user_with_code(new_user(), "04821", None)
        store.add_verification_code(user_id, "11111", None)

        assert store.find_verification_record(user_id, "04821") is not None
        assert store.find_verification_record(user_id, "11111") is not None

    def test_verified_user_hidden_when_unverified_only(
        self, store: PostgresCredentialStore
    ) -> None:
        """unverified_only filters out records of verified users."""
        user_id = store.create_user_with_code(new_user(), "04821", None)
        store.mark_user_verified(user_id, FIXED_NOW)

        assert store.find_verification_record(user_id, "04821") is None
        assert store.find_verification_record(user_id, "04821", unverified_only=False) is not None

    def test_mark_user_verified_sets_timestamp(self, store: PostgresCredentialStore) -> None:
        """mark_user_verified stores the given time."""
        user_id = store.create_user_with_code(new_user(), "04821", None)

        store.mark_user_verified(user_id, FIXED_NOW)

        assert store.find_user_by_email("ana@x.com").email_verified_at == FIXED_NOW
