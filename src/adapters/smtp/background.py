"""
Background email sender adapter - Fire-and-forget delivery.

Wraps another EmailSender and hands each send to a thread pool, so the
calling workflow returns without waiting for delivery. Failures are logged
from the worker thread and never reach the caller. No retries.
"""

import logging
from concurrent.futures import Future, ThreadPoolExecutor

from src.domain.ports import EmailSender

logger = logging.getLogger(__name__)


class BackgroundEmailSender:
    """
    Implements EmailSender protocol on top of a delegate sender.

    Uses structural subtyping - no explicit inheritance from Protocol.
    """

    def __init__(self, delegate: EmailSender, max_workers: int = 2) -> None:
        self._delegate = delegate
        self._executor = ThreadPoolExecutor(
            max_workers=max_workers, thread_name_prefix="email-sender"
        )

    def send_verification_code(self, email: str, code: str) -> Future:
        """
        Schedule delivery and return immediately.

        Returns:
            The scheduled Future (callers are not required to observe it)
        """
        future = self._executor.submit(self._delegate.send_verification_code, email, code)
        future.add_done_callback(lambda f: self._log_failure(f, email))
        return future

    def shutdown(self, wait: bool = True) -> None:
        """Stop accepting sends and optionally drain pending ones."""
        self._executor.shutdown(wait=wait)

    @staticmethod
    def _log_failure(future: Future, email: str) -> None:
        exc = future.exception()
        if exc is not None:
            logger.error("Verification email to %s failed: %s", email, exc)
