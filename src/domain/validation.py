"""
Input validation - Field rules shared by the workflows.

Collects every failing field before raising, so the caller receives the
full field -> message map in a single BadRequestError.
"""

from email_validator import EmailNotValidError, validate_email

from .exceptions import BadRequestError

# bcrypt only considers the first 72 bytes of a password
MAX_PASSWORD_BYTES = 72


class RequestValidator:
    """Accumulates field errors for one request."""

    def __init__(self) -> None:
        self.errors: dict[str, str] = {}

    def required(self, field: str, value: str | None) -> bool:
        if value is None or not str(value).strip():
            self.errors.setdefault(field, "Field is required")
            return False
        return True

    def email(self, field: str, value: str | None) -> None:
        if not self.required(field, value):
            return
        try:
            validate_email(value.strip(), check_deliverability=False)
        except EmailNotValidError:
            self.errors.setdefault(field, "Must be a valid email")

    def min_length(self, field: str, value: str | None, length: int) -> None:
        if not self.required(field, value):
            return
        if len(value) < length:
            self.errors.setdefault(field, f"Minimum length is {length} characters")

    def max_length(self, field: str, value: str | None, length: int) -> None:
        if value is not None and len(value) > length:
            self.errors.setdefault(field, f"Maximum length is {length} characters")

    def max_bytes(self, field: str, value: str | None, length: int) -> None:
        if value is not None and len(value.encode()) > length:
            self.errors.setdefault(field, f"Maximum length is {length} bytes")

    def raise_if_invalid(self) -> None:
        if self.errors:
            raise BadRequestError("validation failed", dict(self.errors))


def normalize_email(email: str) -> str:
    """
    Normalize email address for consistent storage and lookup.

    Applies: strip whitespace + lowercase
    """
    return email.strip().lower()
