"""Security utilities for bearer tokens and password hashing."""

import hashlib
import secrets
from datetime import datetime, timedelta, timezone

import bcrypt
import jwt

from syariahos.core.config import settings


# =============================================================================
# Passwords
# =============================================================================

def hash_password(password: str) -> str:
    """Hash a password with bcrypt (salt embedded in the result)."""
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    """Constant-time comparison of a password against its bcrypt hash."""
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        # Malformed hash in the database
        return False


# =============================================================================
# Bearer Token (JWT)
# =============================================================================

def create_access_token(user_id: int, role: str) -> tuple[str, datetime]:
    """
    Create signed bearer JWT.

    Always signs with current secret (JWT_SECRET). The jti makes every token
    unique so its hash can be stored for revocation.

    Returns:
        (token, expires_at)
    """
    now = datetime.now(timezone.utc)
    expires_at = now + timedelta(hours=settings.JWT_EXPIRES_HOURS)
    payload = {
        "sub": str(user_id),
        "role": role,
        "jti": secrets.token_urlsafe(16),
        "iat": now,
        "exp": expires_at,
    }
    return jwt.encode(payload, settings.JWT_SECRET, algorithm="HS256"), expires_at


def decode_access_token(token: str) -> dict:
    """
    Decode and verify bearer JWT.

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


def hash_token(token: str) -> str:
    """SHA256 hash of a bearer token for storage and lookup."""
    return hashlib.sha256(token.encode()).hexdigest()
