"""
Domain layer - Pure business logic with zero framework imports.

This package contains the identity and access core: registration, email
verification, login, session tokens and role-scoped access to owned
resources. It defines its own port interfaces for infrastructure
abstraction, ensuring true hexagonal architecture decoupling.
"""

from .access import AccessScope, Role, resolve_scope
from .authentication import AuthenticationService
from .config import IdentityConfig
from .exceptions import (
    BadRequestError,
    CodeGenerationExhausted,
    ConflictError,
    DomainError,
    ErrorKind,
    ForbiddenError,
    GoneError,
    NotFoundError,
    UnauthorizedError,
    UnknownRoleError,
)
from .playlists import PlaylistService
from .ports import (
    CredentialStore,
    EmailSender,
    NewUser,
    Playlist,
    PlaylistRepository,
    User,
    VerificationRecord,
)
from .registration import RegistrationService
from .tokens import SessionClaims, TokenService
from .verification import VerificationCodeGenerator

__all__ = [
    "AccessScope",
    "AuthenticationService",
    "BadRequestError",
    "CodeGenerationExhausted",
    "ConflictError",
    "CredentialStore",
    "DomainError",
    "EmailSender",
    "ErrorKind",
    "ForbiddenError",
    "GoneError",
    "IdentityConfig",
    "NewUser",
    "NotFoundError",
    "Playlist",
    "PlaylistRepository",
    "PlaylistService",
    "RegistrationService",
    "Role",
    "SessionClaims",
    "TokenService",
    "UnauthorizedError",
    "UnknownRoleError",
    "User",
    "VerificationCodeGenerator",
    "VerificationRecord",
    "resolve_scope",
]
