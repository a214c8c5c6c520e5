"""Repository adapters - Database implementations."""

from .playlists import PostgresPlaylistRepository
from .postgres import PostgresCredentialStore, run_migrations

__all__ = ["PostgresCredentialStore", "PostgresPlaylistRepository", "run_migrations"]
