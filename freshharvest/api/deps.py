from typing import Optional
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from freshharvest.application.errors import AuthenticationRequired
from freshharvest.application.policy import Identity, enforce, require_admin
from freshharvest.core import set_request_context
from freshharvest.domain.models import Role
from freshharvest.infrastructure.security import decode_access_token

bearer = HTTPBearer(auto_error=False)

def get_identity(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer),
) -> Optional[Identity]:
    """Resolve the bearer token into an identity; no token means an anonymous caller."""
    if credentials is None:
        return None
    claims = decode_access_token(credentials.credentials)
    if not claims:
        raise AuthenticationRequired("Invalid or expired token")
    try:
        identity = Identity(id=int(claims["sub"]), role=Role(claims["role"]))
    except (KeyError, TypeError, ValueError):
        raise AuthenticationRequired("Invalid token claims")
    set_request_context(user_id=str(identity.id))
    return identity

def require_identity(identity: Optional[Identity] = Depends(get_identity)) -> Identity:
    """Reject anonymous callers before the request body is looked at."""
    return enforce(identity)

def require_admin_identity(identity: Optional[Identity] = Depends(get_identity)) -> Identity:
    return require_admin(identity)
