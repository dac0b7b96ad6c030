"""
Authentication utilities.

Passwords: bcrypt, which only accepts up to 72 bytes of input. Registration
rejects anything longer (see UserRegister), and verification treats an
over-long or malformed input as a mismatch.

Tokens: one HS256 JWT per login carrying the user id, role and email.
"""

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

import bcrypt
from jose import JWTError, jwt

from examgen import config

BCRYPT_MAX_BYTES = 72


# ─── Passwords ────────────────────────────────────────────────────────────────

def password_too_long(password: str) -> bool:
    return len(password.encode("utf-8")) > BCRYPT_MAX_BYTES


def hash_password(password: str) -> str:
    if password_too_long(password):
        raise ValueError(f"Password must be at most {BCRYPT_MAX_BYTES} bytes")
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(plain: str, hashed: str) -> bool:
    if password_too_long(plain):
        return False
    try:
        return bcrypt.checkpw(plain.encode("utf-8"), hashed.encode("utf-8"))
    except ValueError:
        # stored hash is not a bcrypt hash
        return False


# ─── Tokens ───────────────────────────────────────────────────────────────────

def create_user_token(user, lifetime: Optional[timedelta] = None) -> str:
    """Signed token for `user`; `sub` is the user id as a string."""
    issued = datetime.now(timezone.utc)
    claims: Dict[str, Any] = {
        "sub": str(user.id),
        "role": user.role,
        "email": user.email,
        "iat": issued,
        "exp": issued + (lifetime or timedelta(minutes=config.JWT_EXPIRES_MINUTES)),
    }
    return jwt.encode(claims, config.JWT_SECRET, algorithm=config.JWT_ALGORITHM)


def decode_token(token: str) -> Optional[Dict[str, Any]]:
    """Claims of a valid, unexpired token; None otherwise."""
    try:
        return jwt.decode(token, config.JWT_SECRET, algorithms=[config.JWT_ALGORITHM])
    except (JWTError, ValueError, TypeError):
        return None
