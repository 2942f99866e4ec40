"""Profile service - preferences, personal data export and data reset."""

from datetime import datetime
from typing import Any

from sqlalchemy.orm import Session, selectinload

from syariahos.db.enums import ActivityAction, SubjectType, Theme
from syariahos.db.models import Category, Task, User
from syariahos.db.types import utcnow
from syariahos.schemas.task import TaskRead
from syariahos.schemas.user import ProfileUpdate, UserRead
from syariahos.services import activity_log_service, category_service


def update_profile(db: Session, user: User, data: ProfileUpdate) -> User:
    """Apply supplied fields and log user.profile_updated in one transaction."""
    changes = data.model_dump(exclude_unset=True)
    try:
        for field, value in changes.items():
            if field == "profile_picture" and value is not None:
                value = str(value)
            elif field in ("theme", "calculation_method") and value is not None:
                value = value.value
            elif field == "name" and value is None:
                continue
            setattr(user, field, value)

        activity_log_service.log_activity(
            db,
            actor_id=user.id,
            action=ActivityAction.PROFILE_UPDATED,
            subject_type=SubjectType.USER,
            subject_id=user.id,
            details={"fields": sorted(changes)},
        )
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(user)
    return user


def export_filename(now: datetime | None = None) -> str:
    now = now or utcnow()
    return f"user-data-{now.strftime('%Y-%m-%d-%H%M%S')}.json"


def export_user_data(db: Session, user: User) -> dict[str, Any]:
    """
    Everything the user owns, serialized for download.

    Returns:
        {"exportedAt", "profile", "tasks" (with history), "categories"}
    """
    tasks = (
        db.query(Task)
        .options(selectinload(Task.history))
        .filter(Task.user_id == user.id)
        .order_by(Task.id)
        .all()
    )
    categories = category_service.list_categories(db, user.id)

    payload = {
        "exportedAt": utcnow().isoformat(),
        "profile": UserRead.model_validate(user).model_dump(
            mode="json", by_alias=True, exclude={"id", "created_at", "updated_at"}
        ),
        "tasks": [
            TaskRead.model_validate(task).model_dump(mode="json", by_alias=True)
            for task in tasks
        ],
        "categories": [{"id": c.id, "name": c.name} for c in categories],
    }

    activity_log_service.log_activity(
        db,
        actor_id=user.id,
        action=ActivityAction.DATA_EXPORTED,
        subject_type=SubjectType.USER,
        subject_id=user.id,
        details={"tasks": len(tasks)},
    )
    db.commit()
    return payload


def reset_user_data(db: Session, user: User) -> User:
    """
    Wipe tasks and categories, reseed default categories and restore
    default preferences. Account and password are preserved.
    """
    try:
        db.query(Task).filter(Task.user_id == user.id).delete(synchronize_session=False)
        db.query(Category).filter(Category.user_id == user.id).delete(
            synchronize_session=False
        )
        db.expire(user, ["tasks", "categories"])
        category_service.seed_default_categories(db, user.id)

        user.theme = Theme.LIGHT.value
        user.zakat_rate = None
        user.preferred_akad = None
        user.calculation_method = None
        user.profile_picture = None

        activity_log_service.log_activity(
            db,
            actor_id=user.id,
            action=ActivityAction.DATA_RESET,
            subject_type=SubjectType.USER,
            subject_id=user.id,
        )
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(user)
    return user
