"""Authorization guards.

Each guard is a FastAPI dependency that either returns the caller's identity
or raises before the route body (and therefore any side effect) runs.
"""

from dataclasses import dataclass

from fastapi import Depends, Header
from sqlalchemy.orm import Session

from identity.auth import get_session_verifier
from identity.user.user import User, UserRole, role_for_email
from shared.config import get_settings
from shared.database import get_session
from shared.exceptions import AuthenticationError, AuthorizationError
from shared.logging import bind_caller


@dataclass(frozen=True)
class AdminIdentity:
    user_id: str
    user: User


def _bearer_token(authorization: str | None) -> str:
    if not authorization:
        raise AuthenticationError({"authorization": ["Missing bearer token"]})
    scheme, _, token = authorization.partition(" ")
    token = token.strip()
    if scheme.lower() != "bearer" or not token:
        raise AuthenticationError({"authorization": ["Expected 'Bearer <token>'"]})
    return token


def require_auth(authorization: str | None = Header(default=None)) -> str:
    """Resolve the caller's user id from the session token."""
    user_id = get_session_verifier().verify_session_token(_bearer_token(authorization))
    bind_caller(user_id)
    return user_id


def require_super_admin(
    user_id: str = Depends(require_auth),
    session: Session = Depends(get_session),
) -> AdminIdentity:
    """Require an authenticated caller whose current email is the super-admin address.

    The stored role records what the user was granted at creation; access is
    decided on the email the caller holds now.
    """
    user = session.get(User, user_id)
    if user is None or role_for_email(user.email, get_settings().super_admin_email) is not UserRole.ADMIN:
        raise AuthorizationError({"role": ["Super admin access required"]})
    return AdminIdentity(user_id=user_id, user=user)
