"""Dashboard service - per-user KPI, goal and trend aggregation.

Aggregates in memory over the user's tasks (one query with history).
"""

from collections import defaultdict
from datetime import datetime, timedelta
from typing import Any

from sqlalchemy.orm import Session, selectinload

from syariahos.db.enums import COMPLIANCE_CATEGORY
from syariahos.db.models import Task
from syariahos.db.types import ensure_utc, utcnow

TREND_WEEKS = 8


def _rate(part: int, total: int) -> int:
    """Integer percentage, rounded half up."""
    if total <= 0:
        return 0
    return (part * 200 + total) // (2 * total)


def get_kpi_data(tasks: list[Task]) -> dict[str, Any]:
    total = len(tasks)
    completed = sum(1 for task in tasks if task.completed)

    by_category: dict[str, list[Task]] = defaultdict(list)
    for task in tasks:
        by_category[task.category].append(task)

    tasks_by_category = []
    for category, category_tasks in by_category.items():
        category_completed = sum(1 for task in category_tasks if task.completed)
        tasks_by_category.append({
            "category": category,
            "total": len(category_tasks),
            "completed": category_completed,
            "rate": _rate(category_completed, len(category_tasks)),
        })

    compliance = by_category.get(COMPLIANCE_CATEGORY, [])
    compliance_completed = sum(1 for task in compliance if task.completed)

    return {
        "total_tasks": total,
        "completed_tasks": completed,
        "completion_percentage": _rate(completed, total),
        "tasks_by_category": tasks_by_category,
        "kepatuhan_syariah_score": _rate(compliance_completed, len(compliance)),
    }


def get_goal_progress(tasks: list[Task]) -> tuple[list[dict[str, Any]], int]:
    """
    Goal totals per category over has-limit tasks with a positive target.

    Returns:
        (goals, overall_progress)
    """
    targeted = [t for t in tasks if t.has_limit and (t.target_value or 0) > 0]

    totals: dict[str, list[int]] = {}
    for task in targeted:
        current, target = totals.setdefault(task.category, [0, 0])
        totals[task.category] = [current + task.current_value, target + task.target_value]

    goals = [
        {
            "category": category,
            "current_value": current,
            "target_value": target,
            "progress": min(100, _rate(current, target)),
        }
        for category, (current, target) in totals.items()
    ]

    overall_current = sum(t.current_value for t in targeted)
    overall_target = sum(t.target_value for t in targeted)
    return goals, min(100, _rate(overall_current, overall_target))


def get_chart_trend(
    tasks: list[Task], now: datetime | None = None, weeks: int = TREND_WEEKS
) -> dict[str, list]:
    """History entries per Monday-Sunday week, oldest week first."""
    now = now or utcnow()
    current_week_start = (now - timedelta(days=now.weekday())).replace(
        hour=0, minute=0, second=0, microsecond=0
    )
    timestamps = [ensure_utc(entry.timestamp) for task in tasks for entry in task.history]

    labels: list[str] = []
    values: list[int] = []
    for offset in range(weeks - 1, -1, -1):
        week_start = current_week_start - timedelta(weeks=offset)
        week_end = week_start + timedelta(days=7)
        labels.append(
            f"{week_start.strftime('%b %d')} - {(week_end - timedelta(days=1)).strftime('%b %d')}"
        )
        values.append(sum(1 for ts in timestamps if week_start <= ts < week_end))

    return {"labels": labels, "values": values}


def get_dashboard_data(db: Session, user_id: int, now: datetime | None = None) -> dict[str, Any]:
    tasks = (
        db.query(Task)
        .options(selectinload(Task.history))
        .filter(Task.user_id == user_id)
        .all()
    )
    goals, overall_progress = get_goal_progress(tasks)
    return {
        "kpi": get_kpi_data(tasks),
        "goals": goals,
        "overall_progress": overall_progress,
        "chart_trend": get_chart_trend(tasks, now),
    }
