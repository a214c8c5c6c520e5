"""
FastAPI dependencies - Dependency injection factories.

This module provides Depends() factories for injecting domain services,
infrastructure adapters and the caller's identity into routes.

Access gating for authenticated routes:
1. get_current_claims - bearer header -> validated SessionClaims (401)
2. require_verified_claims - unverified email -> 403
3. get_access_scope - claims -> AccessScope, resolved once per request
"""

from functools import lru_cache

from fastapi import Depends, Request
from fastapi.security import APIKeyHeader
from psycopg_pool import ConnectionPool

from src.adapters.repository.playlists import PostgresPlaylistRepository
from src.adapters.repository.postgres import PostgresCredentialStore
from src.adapters.smtp.console import ConsoleEmailSender
from src.config.settings import get_settings
from src.domain.access import AccessScope, resolve_scope
from src.domain.authentication import AuthenticationService
from src.domain.config import IdentityConfig
from src.domain.exceptions import ForbiddenError
from src.domain.playlists import PlaylistService
from src.domain.ports import EmailSender
from src.domain.registration import RegistrationService
from src.domain.tokens import SessionClaims, TokenService

# Fallback when the lifespan has not installed a background sender
_console_sender = ConsoleEmailSender()


@lru_cache
def get_identity_config() -> IdentityConfig:
    """Identity configuration, built once from settings."""
    return get_settings().identity_config()


def get_pool(request: Request) -> ConnectionPool:
    """
    Get connection pool from app state.

    The pool is created during app lifespan startup and stored in app.state.
    """
    return request.app.state.pool


def get_credential_store(request: Request) -> PostgresCredentialStore:
    """Create credential store with connection pool from app state."""
    return PostgresCredentialStore(get_pool(request))


def get_playlist_repository(request: Request) -> PostgresPlaylistRepository:
    """Create playlist repository with connection pool from app state."""
    return PostgresPlaylistRepository(get_pool(request))


def get_email_sender(request: Request) -> EmailSender:
    """Background sender from app state, or the console sender."""
    return getattr(request.app.state, "email_sender", _console_sender)


def get_token_service(
    config: IdentityConfig = Depends(get_identity_config),
) -> TokenService:
    return TokenService(config=config)


def get_registration_service(
    request: Request,
    config: IdentityConfig = Depends(get_identity_config),
) -> RegistrationService:
    """
    Create registration service with injected dependencies.

    Wires together the credential store and email sender for the domain service.
    """
    return RegistrationService(
        store=get_credential_store(request),
        email_sender=get_email_sender(request),
        config=config,
    )


def get_authentication_service(
    request: Request,
    token_service: TokenService = Depends(get_token_service),
) -> AuthenticationService:
    return AuthenticationService(
        store=get_credential_store(request),
        token_service=token_service,
    )


def get_playlist_service(request: Request) -> PlaylistService:
    return PlaylistService(repository=get_playlist_repository(request))


# Authorization header security scheme for OpenAPI documentation.
# auto_error=False so a missing header reaches extract_from_header (401).
authorization_header = APIKeyHeader(
    name="Authorization",
    scheme_name="BearerToken",
    description="Session token as `Bearer <token>`",
    auto_error=False,
)


def get_current_claims(
    authorization: str | None = Depends(authorization_header),
    token_service: TokenService = Depends(get_token_service),
) -> SessionClaims:
    """
    Validate the bearer token of the current request.

    Raises:
        UnauthorizedError: Missing/malformed header, invalid or expired token
    """
    token = token_service.extract_from_header(authorization)
    return token_service.validate_token(token)


def require_verified_claims(
    claims: SessionClaims = Depends(get_current_claims),
) -> SessionClaims:
    """
    Block callers whose email is not verified.

    Raises:
        ForbiddenError: If the token's email_verified claim is false
    """
    if not claims.email_verified:
        raise ForbiddenError("Access denied. Please verify your email to continue.")
    return claims


def get_access_scope(
    claims: SessionClaims = Depends(require_verified_claims),
) -> AccessScope:
    """Resolve the caller's role scope once per request."""
    return resolve_scope(claims.role, claims.id)
