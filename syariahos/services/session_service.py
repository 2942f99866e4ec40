"""Bearer token issuance and revocation.

Only the SHA256 hash of a token is stored; the raw token is returned to the
client once.
"""

from sqlalchemy.orm import Session

from syariahos.core.security import create_access_token, hash_token
from syariahos.db.models import AuthToken, User
from syariahos.db.types import utcnow


def issue_token(db: Session, user: User) -> str:
    """Create a token for user and record its hash (flush only)."""
    token, expires_at = create_access_token(user.id, user.role)
    db.add(
        AuthToken(
            user_id=user.id,
            token_hash=hash_token(token),
            expires_at=expires_at,
        )
    )
    db.flush()
    return token


def revoke_token(db: Session, token: str) -> bool:
    """Delete the stored token. Returns True if it existed."""
    deleted = (
        db.query(AuthToken)
        .filter(AuthToken.token_hash == hash_token(token))
        .delete(synchronize_session=False)
    )
    db.flush()
    return deleted > 0


def cleanup_expired_tokens(db: Session) -> int:
    """Delete expired tokens for all users. Returns count removed."""
    removed = (
        db.query(AuthToken)
        .filter(AuthToken.expires_at <= utcnow())
        .delete(synchronize_session=False)
    )
    db.commit()
    return removed
