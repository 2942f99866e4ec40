"""Task reset service - returns recurring tasks to their baseline.

Eligibility is measured in elapsed days, not calendar boundaries: a monthly
task resets 30 days after its last reset, a yearly one after 365.

The sweep commits each task on its own. A failure partway through leaves
the remaining tasks untouched; re-running the sweep picks them up because
already-reset tasks are no longer eligible.
"""

import logging
from datetime import datetime, timedelta

from sqlalchemy import or_
from sqlalchemy.orm import Session

from syariahos.db.enums import RESET_CYCLE_DAYS, ResetCycle
from syariahos.db.models import Task
from syariahos.db.types import ensure_utc, utcnow

logger = logging.getLogger(__name__)


def _cycle_days(reset_cycle: str | None) -> int | None:
    if not reset_cycle:
        return None
    try:
        return RESET_CYCLE_DAYS.get(ResetCycle(reset_cycle))
    except ValueError:
        return None


def should_reset(task: Task, now: datetime | None = None) -> bool:
    """
    Whether task is due for a reset.

    False for tasks without a recurring cycle (including one-time and
    unknown values); True when never reset or last reset strictly before
    now minus the cycle length.
    """
    days = _cycle_days(task.reset_cycle)
    if days is None:
        return False
    if task.last_reset_at is None:
        return True
    cutoff = (now or utcnow()) - timedelta(days=days)
    return ensure_utc(task.last_reset_at) < cutoff


def _apply_reset(task: Task, now: datetime) -> None:
    task.completed = False
    task.current_value = 0
    task.progress = 0
    task.last_reset_at = now


def reset_task(db: Session, task: Task, now: datetime | None = None) -> Task:
    """Reset a single task regardless of eligibility."""
    _apply_reset(task, now or utcnow())
    db.commit()
    return task


def reset_eligible_tasks(db: Session, now: datetime | None = None) -> int:
    """
    Reset every eligible task. One timestamp is used for the whole sweep.

    Returns:
        Number of tasks reset
    """
    now = now or utcnow()
    reset_count = 0

    for cycle, days in RESET_CYCLE_DAYS.items():
        cutoff = now - timedelta(days=days)
        tasks = (
            db.query(Task)
            .filter(
                Task.reset_cycle == cycle.value,
                or_(Task.last_reset_at.is_(None), Task.last_reset_at < cutoff),
            )
            .order_by(Task.id)
            .all()
        )
        for task in tasks:
            _apply_reset(task, now)
            db.commit()
            reset_count += 1

    logger.info("Task reset sweep complete: %s tasks reset", reset_count)
    return reset_count
