"""
app/core/security.py

Purpose: Password hashing and session tokens

- bcrypt hashing / verification for stored passwords
- Signed, time-boxed session tokens (JWT)
"""

from datetime import datetime, timedelta
from typing import Any, Dict, Optional

import bcrypt
import jwt

from app.core.config import settings
from app.core.exceptions import UnauthenticatedError


def _to_bcrypt_secret(password: str) -> bytes:
    """
    bcrypt only uses the first 72 BYTES of the password.
    Truncate explicitly so longer passwords never raise.
    """
    pw = password.encode("utf-8")
    if len(pw) > 72:
        pw = pw[:72]
    return pw


def hash_password(password: str) -> str:
    """
    Returns a bcrypt hash as a UTF-8 string.
    """
    hashed = bcrypt.hashpw(_to_bcrypt_secret(password), bcrypt.gensalt(rounds=12))
    return hashed.decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    """
    Verify password against stored bcrypt hash.
    Malformed stored hashes count as a mismatch.
    """
    if not password_hash:
        return False
    try:
        return bcrypt.checkpw(_to_bcrypt_secret(password), password_hash.encode("utf-8"))
    except ValueError:
        return False


def create_session_token(
    user_id: str,
    phone: str,
    issued_at: datetime,
    ttl_days: Optional[int] = None
) -> str:
    """
    Issues a signed session token bound to a user.

    Args:
        user_id: Identity the token authorizes
        phone: User's phone (informational claim)
        issued_at: Timezone-aware issue time
        ttl_days: Validity window, defaults to SESSION_TTL_DAYS

    Returns:
        Encoded JWT
    """
    ttl = settings.SESSION_TTL_DAYS if ttl_days is None else ttl_days
    payload = {
        "sub": user_id,
        "phone": phone,
        "iat": int(issued_at.timestamp()),
        "exp": int((issued_at + timedelta(days=ttl)).timestamp()),
    }
    return jwt.encode(payload, settings.SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def decode_session_token(token: Optional[str], now: Optional[datetime] = None) -> Dict[str, Any]:
    """
    Verifies signature and expiry of a session token.

    Args:
        token: Encoded JWT (may be None or empty)
        now: Reference time for the expiry check; wall clock when omitted

    Returns:
        Decoded claims

    Raises:
        UnauthenticatedError: token missing, malformed, tampered or expired
    """
    if not token:
        raise UnauthenticatedError("No token provided")

    try:
        claims = jwt.decode(
            token,
            settings.SECRET_KEY,
            algorithms=[settings.JWT_ALGORITHM],
            options={
                "require": ["sub", "exp"],
                "verify_exp": now is None,
                "verify_iat": now is None,
            },
        )
    except jwt.ExpiredSignatureError:
        raise UnauthenticatedError("Session expired")
    except jwt.PyJWTError:
        raise UnauthenticatedError("Invalid token")

    if now is not None and now.timestamp() >= claims["exp"]:
        raise UnauthenticatedError("Session expired")

    return claims
