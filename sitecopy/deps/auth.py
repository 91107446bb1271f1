# sitecopy/deps/auth.py
from __future__ import annotations

from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import ExpiredSignatureError, JWTError
from sqlalchemy.orm import Session

from sitecopy.core.errors import AuthenticationError, PermissionDeniedError
from sitecopy.core.settings import settings
from sitecopy.db.session import get_db
from sitecopy.models.user import User
from sitecopy.security.jwt import decode_token

# Reusable HTTP bearer scheme (non-fatal if header is missing)
_bearer = HTTPBearer(auto_error=False)


def _load_user_from_sub(db: Session, sub: str | int | None) -> Optional[User]:
    try:
        uid = int(sub)
    except (TypeError, ValueError):
        return None
    user = db.get(User, uid)
    if not user or not user.is_active:
        return None
    return user


def get_current_user(
    db: Session = Depends(get_db),
    creds: Optional[HTTPAuthorizationCredentials] = Depends(_bearer),
) -> User:
    if not creds or not creds.credentials:
        raise AuthenticationError("Authentication required")
    try:
        payload = decode_token(creds.credentials)
    except ExpiredSignatureError:
        raise AuthenticationError("Token expired")
    except JWTError:
        raise AuthenticationError("Invalid token")

    user = _load_user_from_sub(db, payload.get("sub"))
    if not user:
        raise AuthenticationError("User not found or inactive")
    return user


def is_admin(user: User) -> bool:
    return (user.role or "").lower() in settings.ADMIN_ROLES


def require_admin(current_user: User = Depends(get_current_user)) -> User:
    """
    Usage:
        @router.post(..., dependencies=[Depends(require_admin)])
    or as a parameter when the actor id is needed for updated_by.
    """
    if not is_admin(current_user):
        raise PermissionDeniedError("Admin role required", details={"role": current_user.role})
    return current_user
