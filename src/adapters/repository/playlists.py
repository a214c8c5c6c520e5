"""
PostgreSQL playlist adapter - Implements the PlaylistRepository protocol.

Every read, update and delete builds its WHERE clause through
_scoped_where(), which adds the owner condition for member scopes.
"""

from typing import Any

from psycopg_pool import ConnectionPool

from src.domain.access import AccessScope
from src.domain.ports import Playlist


def _scoped_where(
    scope: AccessScope, conditions: list[str] | None = None, params: list[Any] | None = None
) -> tuple[str, list[Any]]:
    """
    Build a WHERE clause with the scope's owner restriction applied.

    Returns:
        Tuple of (clause, params); clause is empty when nothing restricts
    """
    conditions = list(conditions or [])
    params = list(params or [])

    if not scope.unrestricted:
        conditions.append("user_id = %s")
        params.append(scope.owner_id)

    if not conditions:
        return "", params
    return " WHERE " + " AND ".join(conditions), params


class PostgresPlaylistRepository:
    """
    Implements PlaylistRepository protocol via psycopg3.

    Uses structural subtyping - no explicit inheritance from Protocol.
    """

    def __init__(self, pool: ConnectionPool) -> None:
        self._pool = pool

    def find_all(self, scope: AccessScope, limit: int, offset: int) -> list[Playlist]:
        where, params = _scoped_where(scope)
        sql = f"SELECT id, user_id, name FROM playlists{where} ORDER BY id DESC LIMIT %s OFFSET %s"

        with self._pool.connection() as conn, conn.cursor() as cursor:
            cursor.execute(sql, (*params, limit, offset))
            rows = cursor.fetchall()

        return [Playlist(id=row[0], user_id=row[1], name=row[2]) for row in rows]

    def count(self, scope: AccessScope) -> int:
        where, params = _scoped_where(scope)
        sql = f"SELECT COUNT(*) FROM playlists{where}"

        with self._pool.connection() as conn, conn.cursor() as cursor:
            cursor.execute(sql, params)
            return cursor.fetchone()[0]

    def find_by_id(self, scope: AccessScope, playlist_id: int) -> Playlist | None:
        where, params = _scoped_where(scope, ["id = %s"], [playlist_id])
        sql = f"SELECT id, user_id, name FROM playlists{where}"

        with self._pool.connection() as conn, conn.cursor() as cursor:
            cursor.execute(sql, params)
            row = cursor.fetchone()

        if row is None:
            return None
        return Playlist(id=row[0], user_id=row[1], name=row[2])

    def create(self, owner_id: int, name: str) -> int:
        sql = "INSERT INTO playlists (user_id, name) VALUES (%s, %s) RETURNING id"

        with self._pool.connection() as conn, conn.cursor() as cursor:
            cursor.execute(sql, (owner_id, name))
            playlist_id = cursor.fetchone()[0]
            conn.commit()

        return playlist_id

    def update(self, scope: AccessScope, playlist_id: int, name: str) -> bool:
        where, params = _scoped_where(scope, ["id = %s"], [playlist_id])
        sql = f"UPDATE playlists SET name = %s, updated_at = NOW(){where}"

        with self._pool.connection() as conn, conn.cursor() as cursor:
            cursor.execute(sql, (name, *params))
            conn.commit()
            return cursor.rowcount == 1

    def delete(self, scope: AccessScope, playlist_id: int) -> bool:
        where, params = _scoped_where(scope, ["id = %s"], [playlist_id])
        sql = f"DELETE FROM playlists{where}"

        with self._pool.connection() as conn, conn.cursor() as cursor:
            cursor.execute(sql, params)
            conn.commit()
            return cursor.rowcount == 1
