"""User service - account creation, lookup and admin management."""

import logging

from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from syariahos.core.errors import BusinessRuleError, FieldValidationError, NotFoundError
from syariahos.core.security import hash_password
from syariahos.db.enums import ActivityAction, Role, SubjectType
from syariahos.db.models import User
from syariahos.schemas.user import AdminUserCreate, AdminUserUpdate
from syariahos.services import activity_log_service, category_service
from syariahos.utils.pagination import PaginationParams, paginate_query

logger = logging.getLogger(__name__)

EMAIL_TAKEN = "The email has already been taken."


def get_user_by_id(db: Session, user_id: int) -> User | None:
    return db.query(User).filter(User.id == user_id).first()


def get_user_by_email(db: Session, email: str) -> User | None:
    return db.query(User).filter(func.lower(User.email) == email.lower()).first()


def create_user(
    db: Session,
    name: str,
    email: str,
    password: str,
    role: Role = Role.USER,
) -> User:
    """
    Create a user with the default category set (flush only).

    Raises:
        FieldValidationError: email already registered
    """
    if get_user_by_email(db, email):
        raise FieldValidationError.single("email", EMAIL_TAKEN)

    user = User(
        name=name,
        email=email.lower(),
        password_hash=hash_password(password),
        role=role.value,
    )
    db.add(user)
    db.flush()
    category_service.seed_default_categories(db, user.id)
    return user


def list_users(
    db: Session, pagination: PaginationParams, search: str | None = None
) -> tuple[list[User], int]:
    """Users newest first, optionally filtered by name/email substring."""
    query = db.query(User)
    if search:
        pattern = f"%{search.strip()}%"
        query = query.filter(or_(User.name.ilike(pattern), User.email.ilike(pattern)))
    query = query.order_by(User.created_at.desc(), User.id.desc())
    return paginate_query(query, pagination)


def get_user_or_404(db: Session, user_id: int) -> User:
    user = get_user_by_id(db, user_id)
    if not user:
        raise NotFoundError("User not found")
    return user


def admin_create_user(db: Session, actor_id: int, data: AdminUserCreate) -> User:
    user = create_user(db, data.name, data.email, data.password, data.role)
    activity_log_service.log_activity(
        db,
        actor_id=actor_id,
        action=ActivityAction.ADMIN_USER_CREATED,
        subject_type=SubjectType.USER,
        subject_id=user.id,
        details={"role": user.role},
    )
    db.commit()
    db.refresh(user)
    return user


def admin_update_user(
    db: Session, actor_id: int, user_id: int, data: AdminUserUpdate
) -> User:
    """
    Apply a partial admin edit.

    Role downgrades are allowed even for the last admin; only deletion
    is guarded.
    """
    user = get_user_or_404(db, user_id)
    changes = data.model_dump(exclude_unset=True)

    if changes.get("email") and changes["email"] != user.email:
        existing = get_user_by_email(db, changes["email"])
        if existing and existing.id != user.id:
            raise FieldValidationError.single("email", EMAIL_TAKEN)

    changed_fields = []
    for field, value in changes.items():
        if value is None:
            continue
        if field == "password":
            user.password_hash = hash_password(value)
        elif field == "role":
            user.role = Role(value).value
        else:
            setattr(user, field, value)
        changed_fields.append(field)

    activity_log_service.log_activity(
        db,
        actor_id=actor_id,
        action=ActivityAction.ADMIN_USER_UPDATED,
        subject_type=SubjectType.USER,
        subject_id=user.id,
        details={"fields": changed_fields},
    )
    db.commit()
    db.refresh(user)
    return user


def count_admins(db: Session) -> int:
    return db.query(User).filter(User.role == Role.ADMIN.value).count()


def admin_delete_user(db: Session, actor_id: int, user_id: int) -> None:
    """
    Delete a user and everything they own.

    Raises:
        BusinessRuleError: the user is the last remaining admin
    """
    user = get_user_or_404(db, user_id)
    if user.is_admin and count_admins(db) <= 1:
        raise BusinessRuleError("Cannot delete the last admin user.")

    # Logged before the delete; an admin removing themselves takes the entry along
    activity_log_service.log_activity(
        db,
        actor_id=actor_id,
        action=ActivityAction.ADMIN_USER_DELETED,
        subject_type=SubjectType.USER,
        subject_id=user.id,
        details={"email": user.email},
    )
    db.delete(user)
    db.commit()
    logger.info("User %s deleted by %s", user_id, actor_id)
