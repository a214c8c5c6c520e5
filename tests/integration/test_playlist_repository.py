"""
Integration tests for PostgresPlaylistRepository.

Verifies that role scopes are enforced by the queries themselves.
Skipped when PostgreSQL is not reachable.
"""

import pytest
from psycopg_pool import ConnectionPool

from src.adapters.repository.playlists import PostgresPlaylistRepository
from src.adapters.repository.postgres import PostgresCredentialStore
from src.domain.access import AccessScope
from src.domain.ports import NewUser

pytestmark = [pytest.mark.integration, pytest.mark.usefixtures("clean_database")]


@pytest.fixture
def repository(pool: ConnectionPool) -> PostgresPlaylistRepository:
    return PostgresPlaylistRepository(pool)


@pytest.fixture
def owners(pool: ConnectionPool) -> tuple[int, int]:
    """Two members: (ana, bob)."""
    store = PostgresCredentialStore(pool)
    ana = store.create_user_with_code(
        NewUser(fullname="Ana", username="ana1", email="ana@x.com", password_hash="h"),
        "00001",
        None,
    )
    bob = store.create_user_with_code(
        NewUser(fullname="Bob", username="bob1", email="bob@x.com", password_hash="h"),
        "00002",
        None,
    )
    return ana, bob


def member(user_id: int) -> AccessScope:
    return AccessScope(caller_id=user_id, owner_id=user_id)


ADMIN = AccessScope(caller_id=0, owner_id=None)


class TestScopedReads:
    """Tests for find_all, count and find_by_id."""

    def test_member_sees_only_own_rows(
        self, repository: PostgresPlaylistRepository, owners: tuple[int, int]
    ) -> None:
        """find_all and count are restricted to the member's rows."""
        ana, bob = owners
        repository.create(ana, "Ana 1")
        repository.create(ana, "Ana 2")
        repository.create(bob, "Bob 1")

        names = {p.name for p in repository.find_all(member(ana), limit=10, offset=0)}

        assert names == {"Ana 1", "Ana 2"}
        assert repository.count(member(ana)) == 2
        assert repository.count(member(bob)) == 1

    def test_admin_sees_all_rows(
        self, repository: PostgresPlaylistRepository, owners: tuple[int, int]
    ) -> None:
        """An unrestricted scope sees every row."""
        ana, bob = owners
        repository.create(ana, "Ana 1")
        repository.create(bob, "Bob 1")

        assert repository.count(ADMIN) == 2
        assert len(repository.find_all(ADMIN, limit=10, offset=0)) == 2

    def test_paging(
        self, repository: PostgresPlaylistRepository, owners: tuple[int, int]
    ) -> None:
        """limit/offset page through rows newest first."""
        ana, _ = owners
        for i in range(5):
            repository.create(ana, f"P{i}")

        page = repository.find_all(member(ana), limit=2, offset=2)

        assert [p.name for p in page] == ["P2", "P1"]

    def test_foreign_row_invisible_to_member(
        self, repository: PostgresPlaylistRepository, owners: tuple[int, int]
    ) -> None:
        """A member cannot fetch another member's playlist by id."""
        ana, bob = owners
        playlist_id = repository.create(bob, "Bob 1")

        assert repository.find_by_id(member(ana), playlist_id) is None
        assert repository.find_by_id(member(bob), playlist_id).user_id == bob
        assert repository.find_by_id(ADMIN, playlist_id) is not None


class TestScopedWrites:
    """Tests for update and delete."""

    def test_member_cannot_modify_foreign_row(
        self, repository: PostgresPlaylistRepository, owners: tuple[int, int]
    ) -> None:
        """Updates and deletes outside the scope affect nothing."""
        ana, bob = owners
        playlist_id = repository.create(bob, "Bob 1")

        assert repository.update(member(ana), playlist_id, "Hijacked") is False
        assert repository.delete(member(ana), playlist_id) is False
        assert repository.find_by_id(ADMIN, playlist_id).name == "Bob 1"

    def test_owner_can_modify_own_row(
        self, repository: PostgresPlaylistRepository, owners: tuple[int, int]
    ) -> None:
        """Updates and deletes inside the scope succeed."""
        ana, _ = owners
        playlist_id = repository.create(ana, "Ana 1")

        assert repository.update(member(ana), playlist_id, "Renamed") is True
        assert repository.find_by_id(member(ana), playlist_id).name == "Renamed"
        assert repository.delete(member(ana), playlist_id) is True
        assert repository.find_by_id(ADMIN, playlist_id) is None

    def test_admin_can_modify_any_row(
        self, repository: PostgresPlaylistRepository, owners: tuple[int, int]
    ) -> None:
        """An unrestricted scope can delete any playlist."""
        _, bob = owners
        playlist_id = repository.create(bob, "Bob 1")

        assert repository.delete(ADMIN, playlist_id) is True
