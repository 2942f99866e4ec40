"""Activity logging service - the application audit trail.

Every mutating operation passes its actor explicitly; nothing here looks up
a "current user". Writes flush but never commit so the entry shares the
caller's transaction.
"""

from sqlalchemy.orm import Session, joinedload

from syariahos.db.enums import ActivityAction, SubjectType
from syariahos.db.models import ActivityLog
from syariahos.utils.pagination import PaginationParams, paginate_query


def log_activity(
    db: Session,
    actor_id: int | None,
    action: ActivityAction,
    subject_type: SubjectType | None = None,
    subject_id: int | None = None,
    details: dict | None = None,
) -> ActivityLog:
    """
    Record an activity.

    Args:
        db: Database session
        actor_id: User who performed the action (None for system)
        action: What happened
        subject_type: Kind of entity affected, if any
        subject_id: Id of the affected entity
        details: Action-specific JSON metadata

    Returns:
        The created activity log entry
    """
    entry = ActivityLog(
        user_id=actor_id,
        action=action.value,
        subject_type=subject_type.value if subject_type else None,
        subject_id=subject_id,
        details=details,
    )
    db.add(entry)
    db.flush()  # Don't commit - let caller control transaction
    return entry


def list_logs(
    db: Session,
    pagination: PaginationParams,
    action: str | None = None,
    user_id: int | None = None,
) -> tuple[list[ActivityLog], int]:
    """Newest-first page of log entries, optionally filtered."""
    query = db.query(ActivityLog).options(joinedload(ActivityLog.user))
    if action:
        query = query.filter(ActivityLog.action == action)
    if user_id:
        query = query.filter(ActivityLog.user_id == user_id)
    query = query.order_by(ActivityLog.created_at.desc(), ActivityLog.id.desc())
    return paginate_query(query, pagination)


def recent(db: Session, limit: int = 10) -> list[ActivityLog]:
    return (
        db.query(ActivityLog)
        .options(joinedload(ActivityLog.user))
        .order_by(ActivityLog.created_at.desc(), ActivityLog.id.desc())
        .limit(limit)
        .all()
    )
