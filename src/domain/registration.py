"""
Registration domain service - Account onboarding and email verification.

This module contains the business logic for creating accounts and proving
ownership of their email address.

Verification Lifecycle
======================

States of a user (derived from email_verified_at):
- UNVERIFIED: email_verified_at is NULL (initial state after registration)
- VERIFIED: email_verified_at is set (terminal)

Verification records:
- One record is created with the user, in the same transaction.
- Each resend appends another record. Earlier records stay valid, so any
  issued, unexpired code can verify the account.
- Records are never consumed or deleted. Only the user row changes.

Transitions:
    UNVERIFIED -> VERIFIED   (matching, unexpired code)
    VERIFIED   -> any        (rejected with Conflict, records not consulted)
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime

import bcrypt

from .clock import Clock, utcnow
from .config import IdentityConfig
from .exceptions import ConflictError, GoneError, NotFoundError
from .ports import CredentialStore, EmailSender, NewUser
from .validation import MAX_PASSWORD_BYTES, RequestValidator, normalize_email
from .verification import VerificationCodeGenerator

logger = logging.getLogger(__name__)

# Kept in step with the users table columns
MAX_FULLNAME_LENGTH = 150
MAX_USERNAME_LENGTH = 100


@dataclass
class RegistrationService:
    """
    Domain service for registration and email verification.

    Orchestrates validation, uniqueness checks, code generation,
    password hashing, atomic persistence and notification.
    """

    store: CredentialStore
    email_sender: EmailSender
    config: IdentityConfig
    code_generator: VerificationCodeGenerator | None = None
    clock: Clock = field(default=utcnow)

    def __post_init__(self) -> None:
        if self.code_generator is None:
            self.code_generator = VerificationCodeGenerator(
                store=self.store,
                length=self.config.code_length,
                max_attempts=self.config.code_max_attempts,
            )

    def register(self, fullname: str, username: str, email: str, password: str) -> int:
        """
        Register a new, unverified member account.

        Args:
            fullname: Display name
            username: Unique handle
            email: User's email address (will be normalized)
            password: User's password (will be hashed)

        Returns:
            The new user's id

        Raises:
            BadRequestError: If a field is missing or malformed
            ConflictError: If the email or username is taken
            CodeGenerationExhausted: If no unused code could be drawn
        """
        validator = RequestValidator()
        validator.required("fullname", fullname)
        validator.required("username", username)
        validator.max_length("fullname", fullname, MAX_FULLNAME_LENGTH)
        validator.max_length("username", username, MAX_USERNAME_LENGTH)
        validator.email("email", email)
        validator.min_length("password", password, self.config.password_min_length)
        validator.max_bytes("password", password, MAX_PASSWORD_BYTES)
        validator.raise_if_invalid()

        normalized_email = normalize_email(email)
        username = username.strip()

        if self.store.email_exists(normalized_email):
            err = ConflictError.for_field("User", "email", normalized_email)
            logger.warning("register rejected: %s", err.message)
            raise err

        if self.store.username_exists(username):
            err = ConflictError.for_field("User", "username", username)
            logger.warning("register rejected: %s", err.message)
            raise err

        code = self.code_generator.generate_code()
        new_user = NewUser(
            fullname=fullname.strip(),
            username=username,
            email=normalized_email,
            password_hash=self._hash_password(password),
        )

        user_id = self.store.create_user_with_code(new_user, code, self._code_expiry())
        logger.info("Registered user %s", user_id)

        self._notify(normalized_email, code)
        return user_id

    def verify_email(self, email: str, code: str) -> None:
        """
        Mark the account verified if the code matches.

        Raises:
            BadRequestError: If email or code is missing or malformed
            NotFoundError: If the user or a matching code does not exist
            ConflictError: If the email is already verified
            GoneError: If the matching code has expired
        """
        validator = RequestValidator()
        validator.email("email", email)
        validator.required("code", code)
        validator.raise_if_invalid()

        normalized_email = normalize_email(email)
        code = code.strip()

        user = self.store.find_user_by_email(normalized_email)
        if user is None:
            err = NotFoundError.for_field("User", "email", normalized_email)
            logger.warning("verify_email rejected: %s", err.message)
            raise err

        if user.is_verified:
            err = ConflictError("Email is already verified.")
            logger.warning("verify_email rejected for user %s: %s", user.id, err.message)
            raise err

        record = self.store.find_verification_record(user.id, code, unverified_only=True)
        if record is None:
            err = NotFoundError.for_field("Verification", "code", code)
            logger.warning("verify_email rejected for user %s: %s", user.id, err.message)
            raise err

        now = self.clock()
        if record.is_expired(now):
            err = GoneError.for_field("Verification Code", "code", code)
            logger.warning("verify_email rejected for user %s: %s", user.id, err.message)
            raise err

        self.store.mark_user_verified(user.id, now)
        logger.info("Verified email for user %s", user.id)

    def resend_verification(self, email: str) -> None:
        """
        Issue an additional verification code for an unverified account.

        Previously issued codes are left untouched.

        Raises:
            BadRequestError: If email is missing or malformed
            NotFoundError: If no user has this email
            ConflictError: If the email is already verified
            CodeGenerationExhausted: If no unused code could be drawn
        """
        validator = RequestValidator()
        validator.email("email", email)
        validator.raise_if_invalid()

        normalized_email = normalize_email(email)

        user = self.store.find_user_by_email(normalized_email)
        if user is None:
            err = NotFoundError.for_field("User", "email", normalized_email)
            logger.warning("resend_verification rejected: %s", err.message)
            raise err

        if user.is_verified:
            err = ConflictError("Email is already verified.")
            logger.warning(
                "resend_verification rejected for user %s: %s", user.id, err.message
            )
            raise err

        code = self.code_generator.generate_code()
        self.store.add_verification_code(user.id, code, self._code_expiry())

        self._notify(normalized_email, code)

    def verification_status(self, email: str) -> bool:
        """
        Report whether the account's email is verified.

        Raises:
            BadRequestError: If email is missing or malformed
            NotFoundError: If no user has this email
        """
        validator = RequestValidator()
        validator.email("email", email)
        validator.raise_if_invalid()

        normalized_email = normalize_email(email)
        user = self.store.find_user_by_email(normalized_email)
        if user is None:
            err = NotFoundError.for_field("User", "email", normalized_email)
            logger.warning("verification_status rejected: %s", err.message)
            raise err

        return user.is_verified

    def _code_expiry(self) -> datetime | None:
        if self.config.code_ttl is None:
            return None
        return self.clock() + self.config.code_ttl

    def _notify(self, email: str, code: str) -> None:
        """Dispatch the verification email without depending on its outcome."""
        try:
            self.email_sender.send_verification_code(email, code)
        except Exception:
            logger.exception("Verification email dispatch failed for %s", email)

    def _hash_password(self, password: str) -> str:
        """Hash password using bcrypt with the configured cost factor."""
        rounds = self.config.bcrypt_cost
        return bcrypt.hashpw(password.encode(), bcrypt.gensalt(rounds=rounds)).decode()


