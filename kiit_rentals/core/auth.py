"""
Authentication Dependencies

Resolves the bearer token on incoming requests into a user id or a User row.
"""

from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session

from .database_client import get_db
from .errors import AuthenticationError
from .security import verify_access_token
from ..models.user import User


# auto_error=False: a missing header is reported by our own handlers, not as a 403
security = HTTPBearer(auto_error=False)


def get_token_subject(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> Optional[str]:
    """
    Optional authentication: the user id carried by a valid bearer token.

    Missing, malformed, badly signed and expired tokens all resolve to None,
    i.e. the request is treated as anonymous.
    """
    if credentials is None:
        return None
    return verify_access_token(credentials.credentials)


def get_current_user(
    subject: Optional[str] = Depends(get_token_subject),
    db: Session = Depends(get_db)
) -> User:
    """
    Dependency to get current authenticated user from JWT token

    Usage in route:
        @router.get("/protected")
        def protected_route(current_user: User = Depends(get_current_user)):
            return {"user_id": current_user.id}

    Raises:
        AuthenticationError: If there is no valid token or its user is gone
    """
    if subject is None:
        raise AuthenticationError("Not authorized, no valid token")

    user = db.query(User).filter(User.id == subject).first()
    if user is None:
        raise AuthenticationError("Not authorized, no valid token")

    return user


def get_current_user_id(current_user: User = Depends(get_current_user)) -> str:
    """Convenience dependency to get just the user ID"""
    return current_user.id
