"""Security utilities for JWT session tokens and password hashing."""

from datetime import datetime, timedelta, timezone
from uuid import UUID

import bcrypt
import jwt

from taskwise.core.config import settings


# =============================================================================
# Session Token (JWT in cookie or bearer header)
# =============================================================================

def create_session_token(user_id: UUID, username: str, email: str) -> str:
    """
    Create signed session JWT.

    Always signs with current secret (JWT_SECRET). The token carries the
    identity the services trust: id, username and email.
    """
    payload = {
        "sub": str(user_id),
        "username": username,
        "email": email,
        "iat": datetime.now(timezone.utc),
        "exp": datetime.now(timezone.utc) + timedelta(hours=settings.JWT_EXPIRES_HOURS),
    }
    return jwt.encode(payload, settings.JWT_SECRET, algorithm="HS256")


def decode_session_token(token: str) -> dict:
    """
    Decode and verify session JWT.

    Tries current secret first, then previous (for rotation support).

    Raises:
        jwt.InvalidTokenError: If token invalid with all secrets
    """
    last_error = None
    for secret in settings.jwt_secrets:
        try:
            return jwt.decode(token, secret, algorithms=["HS256"])
        except jwt.InvalidTokenError as e:
            last_error = e
            continue
    raise last_error  # type: ignore


# =============================================================================
# Passwords
# =============================================================================

def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt(rounds=12)).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        # Malformed stored hash
        return False
