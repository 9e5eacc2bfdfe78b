"""Access guard for catalog and order operations.

Every service call receives the caller's ``Identity`` (or ``None`` for an
anonymous caller) as an argument and asks this module for a decision. Admins
pass every check; other callers must match the required role and, for
owner-scoped resources, own the resource.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from freshharvest.domain.models import Role
from .errors import AuthenticationRequired, AuthorizationDenied


@dataclass(frozen=True)
class Identity:
    id: int
    role: Role

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN


class Decision(str, Enum):
    ALLOW = "allow"
    UNAUTHENTICATED = "unauthenticated"
    FORBIDDEN = "forbidden"


def decide(
    identity: Optional[Identity],
    owner_id: Optional[int] = None,
    required_role: Optional[Role] = None,
) -> Decision:
    if identity is None:
        return Decision.UNAUTHENTICATED
    if identity.is_admin:
        return Decision.ALLOW
    if required_role is not None and identity.role != required_role:
        return Decision.FORBIDDEN
    if owner_id is not None and identity.id != owner_id:
        return Decision.FORBIDDEN
    return Decision.ALLOW


def enforce(
    identity: Optional[Identity],
    owner_id: Optional[int] = None,
    required_role: Optional[Role] = None,
    message: str = "Not authorized",
) -> Identity:
    """Raise unless ``decide`` allows the call; return the identity otherwise."""
    decision = decide(identity, owner_id=owner_id, required_role=required_role)
    if decision is Decision.UNAUTHENTICATED:
        raise AuthenticationRequired()
    if decision is Decision.FORBIDDEN:
        raise AuthorizationDenied(message)
    return identity


def require_admin(identity: Optional[Identity], message: str = "Admin only") -> Identity:
    return enforce(identity, required_role=Role.ADMIN, message=message)
