"""
Verification code generation - Unused numeric codes with bounded retries.

Codes are drawn from the secrets module and checked against every
verification record ever issued. The existence check is not locked: two
callers drawing the same code in the same instant may both succeed. With a
100,000-code space and a retry budget this is accepted.
"""

import logging
import secrets
from dataclasses import dataclass

from .exceptions import CodeGenerationExhausted
from .ports import CredentialStore

logger = logging.getLogger(__name__)

DEFAULT_CODE_LENGTH = 5
DEFAULT_MAX_ATTEMPTS = 5


@dataclass
class VerificationCodeGenerator:
    """Produces verification codes no prior record uses."""

    store: CredentialStore
    length: int = DEFAULT_CODE_LENGTH
    max_attempts: int = DEFAULT_MAX_ATTEMPTS

    def generate_code(self) -> str:
        """
        Return a code that no verification record uses yet.

        Store errors propagate immediately without retrying.

        Raises:
            CodeGenerationExhausted: If every attempt drew a used code
        """
        for attempt in range(1, self.max_attempts + 1):
            code = self._draw()
            if not self.store.code_exists(code):
                return code
            logger.debug("Verification code collision on attempt %d", attempt)

        raise CodeGenerationExhausted(self.max_attempts)

    def _draw(self) -> str:
        """Cryptographically random zero-padded numeric string."""
        return f"{secrets.randbelow(10**self.length):0{self.length}d}"
