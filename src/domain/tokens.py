"""
Token service - Signed, stateless session tokens.

Tokens are JWTs signed with the symmetric key from IdentityConfig. Nothing
is stored server-side: a token is valid iff its signature verifies under
the configured algorithm and its expiry lies in the future.

Validation rules:
- Only the configured algorithm is accepted. A token whose header names any
  other algorithm is rejected before signature checks (algorithm confusion).
- Decoded claims are converted once into SessionClaims. Missing or
  ill-typed fields reject the token at that point, never at use sites.
- Expiry is checked by the JWT library and again against this service's
  clock.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

from jose import JWTError, jwt

from .access import Role
from .clock import Clock, utcnow
from .config import IdentityConfig
from .exceptions import UnauthorizedError, UnknownRoleError

logger = logging.getLogger(__name__)

BEARER_SCHEME = "Bearer"


@dataclass(frozen=True)
class SessionClaims:
    """Identity facts carried by a session token."""

    id: int
    username: str
    role: Role
    email_verified: bool
    issued_at: datetime
    expires_at: datetime

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> "SessionClaims":
        """
        Build claims from a decoded token payload.

        Raises:
            UnauthorizedError: If a required claim is missing or ill-typed
            UnknownRoleError: If a correctly signed token carries an unknown role
        """
        user_id = payload.get("id")
        username = payload.get("username")
        role = payload.get("role")
        email_verified = payload.get("email_verified", False)
        iat = payload.get("iat")
        exp = payload.get("exp")

        if not isinstance(user_id, int) or isinstance(user_id, bool):
            raise UnauthorizedError("Authentication token is not valid.")
        if not isinstance(username, str) or not isinstance(role, str):
            raise UnauthorizedError("Authentication token is not valid.")
        if not isinstance(email_verified, bool):
            raise UnauthorizedError("Authentication token is not valid.")
        if not isinstance(exp, (int, float)) or isinstance(exp, bool):
            raise UnauthorizedError("Authentication token is not valid.")
        if not isinstance(iat, (int, float)) or isinstance(iat, bool):
            raise UnauthorizedError("Authentication token is not valid.")

        try:
            resolved_role = Role(role)
        except ValueError:
            raise UnknownRoleError(role) from None

        return cls(
            id=user_id,
            username=username,
            role=resolved_role,
            email_verified=email_verified,
            issued_at=datetime.fromtimestamp(iat, tz=timezone.utc),
            expires_at=datetime.fromtimestamp(exp, tz=timezone.utc),
        )


@dataclass
class TokenService:
    """Issues and validates session tokens."""

    config: IdentityConfig
    clock: Clock = field(default=utcnow)

    def issue_token(
        self, user_id: int, username: str, role: Role | str, email_verified: bool = True
    ) -> str:
        """
        Build and sign claims for a user.

        Returns:
            Compact JWS representation of the claims
        """
        now = self.clock()
        claims = {
            "id": user_id,
            "username": username,
            "role": Role(role).value,
            "email_verified": email_verified,
            "iat": int(now.timestamp()),
            "exp": int((now + self.config.token_ttl).timestamp()),
        }
        return jwt.encode(
            claims, self.config.signing_key, algorithm=self.config.signing_algorithm
        )

    def validate_token(self, token: str) -> SessionClaims:
        """
        Verify a token and return its claims.

        Raises:
            UnauthorizedError: Malformed token, bad signature, unexpected
                algorithm, missing claims, or expired
        """
        try:
            payload = jwt.decode(
                token,
                self.config.signing_key,
                algorithms=[self.config.signing_algorithm],
            )
        except JWTError as e:
            logger.info("Rejected session token: %s", e)
            raise UnauthorizedError("Token is expired or no longer valid.") from None

        claims = SessionClaims.from_payload(payload)

        if claims.expires_at <= self.clock():
            raise UnauthorizedError("Token is expired or no longer valid.")

        return claims

    def extract_from_header(self, header_value: str | None) -> str:
        """
        Extract the token from an Authorization header value.

        The value must be exactly "Bearer <token>".

        Raises:
            UnauthorizedError: If the header is missing or malformed
        """
        if not header_value:
            raise UnauthorizedError(
                "No Authorization header provided. Please include a valid token."
            )

        parts = header_value.split(" ")
        if len(parts) != 2 or parts[0] != BEARER_SCHEME or not parts[1]:
            raise UnauthorizedError(
                "Authorization header must be in the format: Bearer <token>."
            )

        return parts[1]
