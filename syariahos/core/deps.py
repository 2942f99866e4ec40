"""FastAPI dependencies for authentication, authorization, and database access."""

from typing import Generator

import jwt
from fastapi import Depends, HTTPException, Request
from sqlalchemy.orm import Session

from syariahos.core.security import decode_access_token, hash_token
from syariahos.db.session import SessionLocal
from syariahos.db.types import utcnow

UNAUTHENTICATED = "Unauthenticated"


def get_db() -> Generator[Session, None, None]:
    """
    Database session dependency.

    Yields a database session and ensures it's closed after the request.
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_bearer_token(request: Request) -> str:
    """Extract the bearer token from the Authorization header (401 if absent)."""
    header = request.headers.get("Authorization", "")
    scheme, _, token = header.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        raise HTTPException(status_code=401, detail=UNAUTHENTICATED)
    return token.strip()


def get_current_user(
    token: str = Depends(get_bearer_token),
    db: Session = Depends(get_db),
):
    """
    Get authenticated user from the bearer token.

    Validates:
    - JWT signature and expiry
    - Token hash is still stored (not logged out)
    - User exists

    Raises:
        HTTPException 401: Authentication failed
    """
    # Import here to avoid circular imports
    from syariahos.db.models import AuthToken, User

    try:
        payload = decode_access_token(token)
    except jwt.InvalidTokenError:
        raise HTTPException(status_code=401, detail=UNAUTHENTICATED)

    stored = db.query(AuthToken).filter(AuthToken.token_hash == hash_token(token)).first()
    if not stored or stored.expires_at <= utcnow():
        raise HTTPException(status_code=401, detail=UNAUTHENTICATED)

    user = db.query(User).filter(User.id == int(payload["sub"])).first()
    if not user or user.id != stored.user_id:
        raise HTTPException(status_code=401, detail=UNAUTHENTICATED)

    stored.last_used_at = utcnow()
    db.commit()
    return user


def require_admin(user=Depends(get_current_user)):
    """
    Role gate for /admin routes.

    Usage:
        router = APIRouter(dependencies=[Depends(require_admin)])
    """
    if not user.is_admin:
        raise HTTPException(status_code=403, detail="Admin access required")
    return user
