"""
Port interfaces - Protocol definitions for infrastructure abstraction.

This module defines the records the domain works with and the interfaces
(ports) it requires from infrastructure. Adapters implement these protocols
through structural subtyping.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Protocol

from .access import AccessScope, Role


@dataclass(frozen=True)
class User:
    """
    Account row as seen by the domain.

    A user is verified iff email_verified_at is set. password_hash may be
    None for accounts created without a password.
    """

    id: int
    fullname: str
    username: str
    email: str
    password_hash: str | None
    role: Role
    image: dict[str, Any] | None = None
    email_verified_at: datetime | None = None

    @property
    def is_verified(self) -> bool:
        return self.email_verified_at is not None


@dataclass(frozen=True)
class NewUser:
    """Values for a user row that does not exist yet."""

    fullname: str
    username: str
    email: str
    password_hash: str
    role: Role = Role.MEMBER


@dataclass(frozen=True)
class VerificationRecord:
    """
    One issued verification code.

    Records are append-only: never updated, never deleted on success.
    expired_at of None means the code never expires.
    """

    code: str
    user_id: int
    created_at: datetime
    expired_at: datetime | None = None

    def is_expired(self, now: datetime) -> bool:
        return self.expired_at is not None and self.expired_at < now


@dataclass(frozen=True)
class Playlist:
    """User-owned playlist."""

    id: int
    user_id: int
    name: str


class CredentialStore(Protocol):
    """Port interface for user and verification code persistence."""

    def find_user_by_email(self, email: str) -> User | None:
        """Return the user with this (normalized) email, or None."""
        ...

    def find_user_by_id(self, user_id: int) -> User | None:
        """Return the user with this id, or None."""
        ...

    def email_exists(self, email: str) -> bool:
        """True if any user already holds this email."""
        ...

    def username_exists(self, username: str) -> bool:
        """True if any user already holds this username."""
        ...

    def create_user_with_code(
        self, user: NewUser, code: str, expired_at: datetime | None
    ) -> int:
        """
        Insert a user and its first verification code atomically.

        Both rows are written in one transaction; on any failure neither
        row persists.

        Returns:
            The store-assigned user id

        Raises:
            ConflictError: If a concurrent insert claimed the email or username
        """
        ...

    def add_verification_code(
        self, user_id: int, code: str, expired_at: datetime | None
    ) -> None:
        """Append a verification code for an existing user."""
        ...

    def code_exists(self, code: str) -> bool:
        """True if any verification record, for any user, uses this code."""
        ...

    def find_verification_record(
        self, user_id: int, code: str, unverified_only: bool = True
    ) -> VerificationRecord | None:
        """
        Find the record matching both user and code.

        With unverified_only, records of users that are already verified
        are never returned.
        """
        ...

    def mark_user_verified(self, user_id: int, verified_at: datetime) -> None:
        """Set email_verified_at for the user."""
        ...


class PlaylistRepository(Protocol):
    """
    Port interface for playlist persistence.

    Every read and write takes the caller's AccessScope and must apply it
    to the query itself: member scopes only ever see their own rows.
    """

    def find_all(self, scope: AccessScope, limit: int, offset: int) -> list[Playlist]:
        ...

    def count(self, scope: AccessScope) -> int:
        ...

    def find_by_id(self, scope: AccessScope, playlist_id: int) -> Playlist | None:
        ...

    def create(self, owner_id: int, name: str) -> int:
        ...

    def update(self, scope: AccessScope, playlist_id: int, name: str) -> bool:
        """Rename a visible playlist. Returns False if no row matched."""
        ...

    def delete(self, scope: AccessScope, playlist_id: int) -> bool:
        """Delete a visible playlist. Returns False if no row matched."""
        ...


class EmailSender(Protocol):
    """
    Port interface for email delivery.

    Fire-and-forget: the domain never waits on or inspects the outcome.
    """

    def send_verification_code(self, email: str, code: str) -> None:
        """
        Send verification code to email address.

        Args:
            email: Recipient email address
            code: Verification code
        """
        ...
