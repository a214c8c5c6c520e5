"""Clock helpers - Timezone-aware current time."""

from collections.abc import Callable
from datetime import datetime, timezone

Clock = Callable[[], datetime]


def utcnow() -> datetime:
    """Current time in UTC."""
    return datetime.now(timezone.utc)
