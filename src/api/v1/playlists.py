"""
API v1 playlist routes.

Every route depends on get_access_scope, so the caller is authenticated,
verified, and scoped before the handler runs.
"""

from fastapi import APIRouter, Depends, Query, status

from src.api.dependencies import get_access_scope, get_playlist_service
from src.api.models import (
    ErrorResponse,
    MessageResponse,
    PlaylistListResponse,
    PlaylistRequest,
    PlaylistResponse,
)
from src.domain.access import AccessScope
from src.domain.playlists import PlaylistService

router = APIRouter(
    prefix="/playlists",
    tags=["playlists"],
    responses={
        401: {"model": ErrorResponse, "description": "Missing or invalid token"},
        403: {"model": ErrorResponse, "description": "Email not verified"},
    },
)


@router.get("", response_model=PlaylistListResponse, summary="List playlists")
def list_playlists(
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100),
    scope: AccessScope = Depends(get_access_scope),
    service: PlaylistService = Depends(get_playlist_service),
) -> PlaylistListResponse:
    playlists = service.list_playlists(scope, page=page, page_size=page_size)
    total = service.count_playlists(scope)
    return PlaylistListResponse(
        data=[PlaylistResponse(id=p.id, name=p.name) for p in playlists],
        total=total,
        page=page,
        page_size=page_size,
    )


@router.get(
    "/{playlist_id}",
    response_model=PlaylistResponse,
    responses={404: {"model": ErrorResponse, "description": "Playlist not found"}},
    summary="Get playlist",
)
def get_playlist(
    playlist_id: int,
    scope: AccessScope = Depends(get_access_scope),
    service: PlaylistService = Depends(get_playlist_service),
) -> PlaylistResponse:
    playlist = service.get_playlist(scope, playlist_id)
    return PlaylistResponse(id=playlist.id, name=playlist.name)


@router.post(
    "",
    response_model=MessageResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse, "description": "Validation error"}},
    summary="Create playlist",
)
def create_playlist(
    request_data: PlaylistRequest,
    scope: AccessScope = Depends(get_access_scope),
    service: PlaylistService = Depends(get_playlist_service),
) -> MessageResponse:
    service.create_playlist(scope.caller_id, request_data.name)
    return MessageResponse(message="Playlist created")


@router.put(
    "/{playlist_id}",
    response_model=MessageResponse,
    responses={
        400: {"model": ErrorResponse, "description": "Validation error"},
        404: {"model": ErrorResponse, "description": "Playlist not found"},
    },
    summary="Rename playlist",
)
def update_playlist(
    playlist_id: int,
    request_data: PlaylistRequest,
    scope: AccessScope = Depends(get_access_scope),
    service: PlaylistService = Depends(get_playlist_service),
) -> MessageResponse:
    service.update_playlist(scope, playlist_id, request_data.name)
    return MessageResponse(message="Playlist updated")


@router.delete(
    "/{playlist_id}",
    response_model=MessageResponse,
    responses={404: {"model": ErrorResponse, "description": "Playlist not found"}},
    summary="Delete playlist",
)
def delete_playlist(
    playlist_id: int,
    scope: AccessScope = Depends(get_access_scope),
    service: PlaylistService = Depends(get_playlist_service),
) -> MessageResponse:
    service.delete_playlist(scope, playlist_id)
    return MessageResponse(message="Playlist deleted")
