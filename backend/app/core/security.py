"""
Password hashing and JWT helpers for the bearer-token identity.

Hashing is plain unsalted SHA-256, enough to keep the HTTP layer
working, not a credential store.
"""

import hashlib
import hmac
from datetime import timedelta
from typing import Optional

import jwt

from app.core.settings import settings
from app.core.time_utils import utc_now

ALGORITHM = "HS256"


def hash_password(plain_password: str) -> str:
    return hashlib.sha256(plain_password.encode("utf-8")).hexdigest()


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return hmac.compare_digest(hash_password(plain_password), hashed_password)


def create_access_token(user_id: int, expires_delta: Optional[timedelta] = None) -> str:
    issued_at = utc_now()
    lifetime = expires_delta or timedelta(minutes=settings.access_token_expire_minutes)
    claims = {"sub": str(user_id), "iat": issued_at, "exp": issued_at + lifetime}
    return jwt.encode(claims, settings.secret_key, algorithm=ALGORITHM)


def decode_user_id(token: str) -> int:
    """User id carried in ``token``.

    Raises ``jwt.PyJWTError`` for a bad or expired token and ``ValueError``
    when the subject is missing or not an id.
    """
    payload = jwt.decode(token, settings.secret_key, algorithms=[ALGORITHM])
    subject = payload.get("sub")
    if subject is None:
        raise ValueError("token has no subject")
    return int(subject)
