"""JWT helpers for admin sessions."""

from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import JWTError, jwt

from codeassess.config import JWT_SECRET, JWT_ALGORITHM, JWT_EXPIRE_MINUTES


def create_access_token(data: dict, expires_minutes: int = JWT_EXPIRE_MINUTES) -> str:
    payload = dict(data)
    payload["exp"] = datetime.now(timezone.utc) + timedelta(minutes=expires_minutes)
    return jwt.encode(payload, JWT_SECRET, algorithm=JWT_ALGORITHM)


def decode_token(token: str) -> Optional[dict]:
    """Return the payload, or None for a bad or expired token"""
    try:
        return jwt.decode(token, JWT_SECRET, algorithms=[JWT_ALGORITHM])
    except JWTError:
        return None
