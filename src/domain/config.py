"""Identity configuration - Read-only values loaded once at startup."""

from dataclasses import dataclass
from datetime import timedelta


@dataclass(frozen=True)
class IdentityConfig:
    """
    Process-wide identity settings.

    Built once from application settings and handed to each service's
    constructor. Never mutated after startup.
    """

    signing_key: str
    signing_algorithm: str = "HS256"
    token_ttl: timedelta = timedelta(hours=24)
    bcrypt_cost: int = 10
    code_length: int = 5
    code_max_attempts: int = 5
    code_ttl: timedelta | None = None
    password_min_length: int = 6
