# sitecopy/security/jwt.py
from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any, Dict

from jose import jwt

from sitecopy.core.settings import settings


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _exp_ts(minutes: int) -> int:
    # exp como entero UNIX (segundos), más compatible
    return int((_utcnow() + timedelta(minutes=minutes)).timestamp())


def create_access_token(subject: int | str, extra: Dict[str, Any] | None = None, minutes: int | None = None) -> str:
    payload: Dict[str, Any] = {
        "sub": str(subject),
        "type": "access",
        "iat": int(_utcnow().timestamp()),
        "exp": _exp_ts(minutes if minutes is not None else settings.JWT_ACCESS_TOKEN_EXPIRE_MINUTES),
    }
    if extra:
        payload.update(extra)
    return jwt.encode(payload, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def decode_token(token: str) -> Dict[str, Any]:
    # JWTError / ExpiredSignatureError se propagan: el caller responde 401
    return jwt.decode(
        token,
        settings.JWT_SECRET_KEY,
        algorithms=[settings.JWT_ALGORITHM],
        options={"verify_aud": False, "verify_iss": False},
    )
