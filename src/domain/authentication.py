"""
Authentication domain service - Credential checks and token issuance.

Login is gated on email verification: a correct password for an
unverified account is still refused. Login never mutates the user.
"""

import logging
from dataclasses import dataclass

import bcrypt

from .exceptions import ForbiddenError, NotFoundError
from .ports import CredentialStore, User
from .tokens import TokenService
from .validation import MAX_PASSWORD_BYTES, RequestValidator, normalize_email

logger = logging.getLogger(__name__)


@dataclass
class AuthenticationService:
    """Domain service for login and the authenticated profile."""

    store: CredentialStore
    token_service: TokenService

    def login(self, email: str, password: str) -> str:
        """
        Authenticate credentials and issue a session token.

        Args:
            email: User's email address (will be normalized)
            password: User's plaintext password

        Returns:
            Signed session token

        Raises:
            BadRequestError: If a field is missing or malformed
            NotFoundError: If the email is unknown or the password mismatches
            ForbiddenError: If the email is not verified yet
        """
        validator = RequestValidator()
        validator.email("email", email)
        validator.required("password", password)
        validator.max_bytes("password", password, MAX_PASSWORD_BYTES)
        validator.raise_if_invalid()

        normalized_email = normalize_email(email)

        user = self.store.find_user_by_email(normalized_email)
        if user is None:
            err = NotFoundError.for_field("User", "email", normalized_email)
            logger.warning("login rejected: %s", err.message)
            raise err

        if not self._check_password(password, user.password_hash):
            err = NotFoundError("Password mismatch. Try again.")
            logger.warning("login rejected for user %s: %s", user.id, err.message)
            raise err

        if not user.is_verified:
            err = ForbiddenError("Access denied. Please verify your email to continue.")
            logger.warning("login rejected for user %s: %s", user.id, err.message)
            raise err

        return self.token_service.issue_token(
            user.id, user.username, user.role, email_verified=True
        )

    def profile(self, user_id: int) -> User:
        """
        Load the account behind a validated token.

        Raises:
            NotFoundError: If the user no longer exists
        """
        user = self.store.find_user_by_id(user_id)
        if user is None:
            err = NotFoundError.for_field("User", "id", user_id)
            logger.warning("profile rejected: %s", err.message)
            raise err
        return user

    def _check_password(self, password: str, password_hash: str | None) -> bool:
        """Constant-time bcrypt comparison; accounts without a hash never match."""
        if not password_hash:
            return False
        try:
            return bcrypt.checkpw(password.encode(), password_hash.encode())
        except ValueError:
            logger.error("bcrypt rejected the password check against the stored hash")
            return False
