"""
Per-request session handling.

There is no process-wide "current user": every route that needs the caller
receives an AuthSession built from its bearer token.
"""
from dataclasses import dataclass
from typing import Optional

from fastapi import Depends
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError
from sqlalchemy.orm import Session

from app.core.errors import Forbidden, NotFound, Unauthorized
from app.core.security import decode_access_token
from app.db.models.user import User
from app.db.session import get_db

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/login")
optional_oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/login", auto_error=False)


@dataclass(frozen=True)
class AuthSession:
    user_id: str
    email: str
    role: str

    @property
    def is_recruiter(self) -> bool:
        return self.role == "recruiter"

    @property
    def is_candidate(self) -> bool:
        return self.role == "candidate"


def _session_from_token(token: str, db: Session) -> AuthSession:
    try:
        payload = decode_access_token(token)
    except JWTError:
        raise Unauthorized("Invalid token")

    user_id = payload.get("sub")
    if user_id is None:
        raise Unauthorized("Invalid token")

    user = db.get(User, user_id)
    if not user:
        raise Unauthorized("User not found")

    return AuthSession(user_id=user.id, email=user.email, role=user.role)


def get_current_session(
    token: str = Depends(oauth2_scheme),
    db: Session = Depends(get_db)
) -> AuthSession:
    """Authenticated session from the JWT; 401 when missing or invalid."""
    return _session_from_token(token, db)


def get_optional_session(
    token: Optional[str] = Depends(optional_oauth2_scheme),
    db: Session = Depends(get_db)
) -> Optional[AuthSession]:
    """Session when a bearer token is sent, else None."""
    if not token:
        return None
    return _session_from_token(token, db)


def get_current_user_obj(
    session: AuthSession = Depends(get_current_session),
    db: Session = Depends(get_db)
) -> User:
    """Get current User object from JWT token."""
    user = db.get(User, session.user_id)
    if not user:
        raise NotFound("User not found")
    return user


def ensure_same_user(session: Optional[AuthSession], claimed_user_id: str):
    """A token, when present, must belong to the user named in the request body."""
    if session is not None and session.user_id != claimed_user_id:
        raise Forbidden("Forbidden: authenticated user does not match the request.")
