"""Auth service - registration, login and logout."""

import logging

from sqlalchemy.orm import Session

from syariahos.core.security import verify_password
from syariahos.db.enums import ActivityAction, SubjectType
from syariahos.db.models import User
from syariahos.schemas.auth import RegisterRequest
from syariahos.services import activity_log_service, session_service, user_service

logger = logging.getLogger(__name__)


def register(db: Session, data: RegisterRequest) -> tuple[User, str]:
    """
    Create the account, its default categories, a token and the
    user.registered log entry in one transaction.
    """
    try:
        user = user_service.create_user(db, data.name, data.email, data.password)
        token = session_service.issue_token(db, user)
        activity_log_service.log_activity(
            db,
            actor_id=user.id,
            action=ActivityAction.USER_REGISTERED,
            subject_type=SubjectType.USER,
            subject_id=user.id,
        )
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(user)
    return user, token


def login(db: Session, email: str, password: str) -> tuple[User, str] | None:
    """Return (user, token) for valid credentials, else None."""
    user = user_service.get_user_by_email(db, email)
    if not user or not verify_password(password, user.password_hash):
        logger.info("Failed login attempt")
        return None

    token = session_service.issue_token(db, user)
    activity_log_service.log_activity(
        db,
        actor_id=user.id,
        action=ActivityAction.USER_LOGIN,
        subject_type=SubjectType.USER,
        subject_id=user.id,
    )
    db.commit()
    db.refresh(user)
    return user, token


def logout(db: Session, user: User, token: str) -> None:
    """Revoke the presented token."""
    session_service.revoke_token(db, token)
    activity_log_service.log_activity(
        db,
        actor_id=user.id,
        action=ActivityAction.USER_LOGOUT,
        subject_type=SubjectType.USER,
        subject_id=user.id,
    )
    db.commit()
