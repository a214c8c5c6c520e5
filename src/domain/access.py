"""
Role scope policy - Which rows a caller may see.

A scope is resolved once per request from the caller's token claims and
passed explicitly to every owned-resource operation. Member scopes restrict
queries to rows owned by the caller; admin scopes are unrestricted.
"""

from dataclasses import dataclass
from enum import Enum

from .exceptions import UnknownRoleError


class Role(str, Enum):
    """Account roles."""

    MEMBER = "member"
    ADMIN = "admin"


@dataclass(frozen=True)
class AccessScope:
    """
    Visibility restriction for owned resources.

    owner_id is None for an unrestricted (admin) scope.
    """

    caller_id: int
    owner_id: int | None

    @property
    def unrestricted(self) -> bool:
        return self.owner_id is None


def resolve_scope(role: Role | str, caller_id: int) -> AccessScope:
    """
    Resolve the access scope for a caller.

    Raises:
        UnknownRoleError: If role is not a known Role value
    """
    try:
        resolved = Role(role)
    except ValueError:
        raise UnknownRoleError(role) from None

    if resolved is Role.ADMIN:
        return AccessScope(caller_id=caller_id, owner_id=None)
    return AccessScope(caller_id=caller_id, owner_id=caller_id)
