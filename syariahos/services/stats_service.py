"""Platform statistics for the admin dashboard."""

from datetime import datetime, timedelta
from typing import Any

from sqlalchemy import func
from sqlalchemy.orm import Session

from syariahos.db.enums import ActivityAction
from syariahos.db.models import ActivityLog, Task, User
from syariahos.db.types import utcnow
from syariahos.services import activity_log_service

ACTIVE_WINDOW_DAYS = 30
GROWTH_MONTHS = 6


def count_active_users(db: Session, since: datetime, until: datetime | None = None) -> int:
    """Distinct users with a login in [since, until)."""
    query = db.query(func.count(func.distinct(ActivityLog.user_id))).filter(
        ActivityLog.action == ActivityAction.USER_LOGIN.value,
        ActivityLog.created_at >= since,
    )
    if until is not None:
        query = query.filter(ActivityLog.created_at < until)
    return query.scalar() or 0


def get_stats(db: Session, now: datetime | None = None) -> dict[str, Any]:
    now = now or utcnow()
    return {
        "total_users": db.query(User).count(),
        "total_tasks": db.query(Task).count(),
        "completed_tasks": db.query(Task).filter(Task.completed.is_(True)).count(),
        "active_users": count_active_users(db, now - timedelta(days=ACTIVE_WINDOW_DAYS)),
        "recent_activity": activity_log_service.recent(db, limit=10),
    }


def _month_start(value: datetime, months_back: int) -> datetime:
    """First instant of the month `months_back` months before value (negative = ahead)."""
    year, month = divmod(value.year * 12 + value.month - 1 - months_back, 12)
    return value.replace(
        year=year, month=month + 1, day=1, hour=0, minute=0, second=0, microsecond=0
    )


def get_user_growth(
    db: Session, now: datetime | None = None, months: int = GROWTH_MONTHS
) -> dict[str, Any]:
    """
    Monthly registrations for the last `months` calendar months (oldest first).

    growthRate is the percent change in new users versus the previous month.
    """
    now = now or utcnow()
    monthly = []
    first_start = _month_start(now, months - 1)
    previous_new = (
        db.query(User)
        .filter(User.created_at >= _month_start(now, months), User.created_at < first_start)
        .count()
    )

    for back in range(months - 1, -1, -1):
        start = _month_start(now, back)
        end = _month_start(now, back - 1)
        new_users = (
            db.query(User).filter(User.created_at >= start, User.created_at < end).count()
        )
        total_users = db.query(User).filter(User.created_at < end).count()
        if previous_new:
            growth_rate = round((new_users - previous_new) / previous_new * 100, 1)
        else:
            growth_rate = 100.0 if new_users else 0.0
        monthly.append({
            "month": start.strftime("%b"),
            "month_full": start.strftime("%B %Y"),
            "new_users": new_users,
            "total_users": total_users,
            "active_users": count_active_users(db, start, end),
            "growth_rate": growth_rate,
        })
        previous_new = new_users

    rates = [m["growth_rate"] for m in monthly]
    return {
        "monthly": monthly,
        "summary": {
            "total_new_users": sum(m["new_users"] for m in monthly),
            "avg_growth_rate": round(sum(rates) / len(rates), 1) if rates else 0.0,
            "active_users": count_active_users(db, now - timedelta(days=ACTIVE_WINDOW_DAYS)),
        },
    }
