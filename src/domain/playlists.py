"""
Playlist domain service - Owned-resource access under a role scope.

Every operation receives the caller's AccessScope and passes it down to the
repository so visibility is decided by the query itself. A member asking
for someone else's playlist gets the same NotFound as for a missing one.
"""

import logging
from dataclasses import dataclass

from .access import AccessScope
from .exceptions import NotFoundError
from .ports import Playlist, PlaylistRepository
from .validation import RequestValidator

logger = logging.getLogger(__name__)

MAX_NAME_LENGTH = 100
MAX_PAGE_SIZE = 100


@dataclass
class PlaylistService:
    """Domain service for playlists."""

    repository: PlaylistRepository

    def list_playlists(
        self, scope: AccessScope, page: int = 1, page_size: int = 20
    ) -> list[Playlist]:
        page = max(page, 1)
        page_size = min(max(page_size, 1), MAX_PAGE_SIZE)
        return self.repository.find_all(scope, limit=page_size, offset=(page - 1) * page_size)

    def count_playlists(self, scope: AccessScope) -> int:
        return self.repository.count(scope)

    def get_playlist(self, scope: AccessScope, playlist_id: int) -> Playlist:
        """
        Raises:
            NotFoundError: If the playlist does not exist or is not visible
        """
        playlist = self.repository.find_by_id(scope, playlist_id)
        if playlist is None:
            raise self._not_found("get_playlist", playlist_id)
        return playlist

    def create_playlist(self, owner_id: int, name: str) -> int:
        name = self._validate_name(name)
        playlist_id = self.repository.create(owner_id, name)
        logger.info("Created playlist %s for user %s", playlist_id, owner_id)
        return playlist_id

    def update_playlist(self, scope: AccessScope, playlist_id: int, name: str) -> None:
        name = self._validate_name(name)
        if not self.repository.update(scope, playlist_id, name):
            raise self._not_found("update_playlist", playlist_id)

    def delete_playlist(self, scope: AccessScope, playlist_id: int) -> None:
        if not self.repository.delete(scope, playlist_id):
            raise self._not_found("delete_playlist", playlist_id)

    def _validate_name(self, name: str) -> str:
        validator = RequestValidator()
        validator.required("name", name)
        validator.max_length("name", name, MAX_NAME_LENGTH)
        validator.raise_if_invalid()
        return name.strip()

    def _not_found(self, operation: str, playlist_id: int) -> NotFoundError:
        err = NotFoundError.for_field("Playlist", "id", playlist_id)
        logger.warning("%s rejected: %s", operation, err.message)
        return err
