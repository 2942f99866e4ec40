"""Task service - business logic for tasks, progress and history corrections."""

from sqlalchemy.orm import Session, selectinload

from syariahos.core.errors import BusinessRuleError, FieldValidationError, NotFoundError
from syariahos.db.enums import ActivityAction, SubjectType
from syariahos.db.models import Task, TaskHistory
from syariahos.schemas.task import HistoryUpdate, ProgressCreate, TaskCreate, TaskUpdate
from syariahos.services import activity_log_service

# Fields that may be cleared by sending null on update
NULLABLE_FIELDS = {"target_value", "unit", "reset_cycle"}


def calculate_progress(current_value: int, target_value: int | None) -> int:
    """Percent of target reached, rounded half up and capped at 100."""
    if not target_value or target_value <= 0:
        return 0
    current = max(current_value, 0)
    percent = (current * 200 + target_value) // (2 * target_value)
    return min(100, percent)


def apply_limit_progress(task: Task) -> None:
    """Derive progress and completed from current/target for a has-limit task."""
    task.progress = calculate_progress(task.current_value, task.target_value)
    target = task.target_value or 0
    task.completed = target > 0 and task.current_value >= target


def validate_limit_fields(has_limit: bool, target_value: int | None, unit: str | None) -> None:
    """
    Raises:
        FieldValidationError: has-limit task without target value or unit
    """
    if not has_limit:
        return
    errors: dict[str, list[str]] = {}
    if target_value is None:
        errors["targetValue"] = ["The target value field is required when has limit is true."]
    if not unit:
        errors["unit"] = ["The unit field is required when has limit is true."]
    if errors:
        raise FieldValidationError(errors)


def list_tasks(
    db: Session,
    user_id: int,
    category: str | None = None,
    search: str | None = None,
    cycle: str | None = None,
) -> list[Task]:
    """The user's tasks newest first, with history loaded."""
    query = (
        db.query(Task)
        .options(selectinload(Task.history))
        .filter(Task.user_id == user_id)
    )
    if category:
        query = query.filter(Task.category == category)
    if search:
        pattern = f"%{search.strip()}%"
        query = query.filter(Task.text.ilike(pattern))
    if cycle:
        query = query.filter(Task.reset_cycle == cycle)
    return query.order_by(Task.created_at.desc(), Task.id.desc()).all()


def get_task(db: Session, user_id: int, task_id: int) -> Task:
    """
    Fetch a task owned by user_id.

    Raises:
        NotFoundError: absent or owned by someone else
    """
    task = (
        db.query(Task)
        .options(selectinload(Task.history))
        .filter(Task.id == task_id, Task.user_id == user_id)
        .first()
    )
    if not task:
        raise NotFoundError("Task not found")
    return task


def create_task(db: Session, user_id: int, data: TaskCreate) -> Task:
    validate_limit_fields(data.has_limit, data.target_value, data.unit)

    task = Task(
        user_id=user_id,
        text=data.text,
        category=data.category,
        completed=False,
        progress=0,
        has_limit=data.has_limit,
        current_value=0,
        target_value=data.target_value if data.has_limit else None,
        unit=data.unit if data.has_limit else None,
        reset_cycle=data.reset_cycle.value if data.reset_cycle else None,
        per_check_enabled=data.per_check_enabled,
        increment_value=data.increment_value,
    )
    db.add(task)
    db.flush()
    activity_log_service.log_activity(
        db,
        actor_id=user_id,
        action=ActivityAction.TASK_CREATED,
        subject_type=SubjectType.TASK,
        subject_id=task.id,
        details={"text": task.text, "category": task.category},
    )
    db.commit()
    db.refresh(task)
    return task


def update_task(db: Session, user_id: int, task_id: int, data: TaskUpdate) -> Task:
    """Partial update; progress is re-derived from the resulting values."""
    task = get_task(db, user_id, task_id)
    changes = data.model_dump(exclude_unset=True)

    merged = {
        "has_limit": task.has_limit,
        "target_value": task.target_value,
        "unit": task.unit,
    }
    for field in merged:
        if field in changes and (changes[field] is not None or field in NULLABLE_FIELDS):
            merged[field] = changes[field]
    validate_limit_fields(merged["has_limit"], merged["target_value"], merged["unit"])

    for field, value in changes.items():
        if value is None and field not in NULLABLE_FIELDS:
            continue
        if field == "reset_cycle" and value is not None:
            value = value.value
        setattr(task, field, value)

    if task.has_limit:
        apply_limit_progress(task)
    else:
        task.progress = 100 if task.completed else 0

    activity_log_service.log_activity(
        db,
        actor_id=user_id,
        action=ActivityAction.TASK_UPDATED,
        subject_type=SubjectType.TASK,
        subject_id=task.id,
        details={"fields": sorted(changes)},
    )
    db.commit()
    db.refresh(task)
    return task


def delete_task(db: Session, user_id: int, task_id: int) -> None:
    task = get_task(db, user_id, task_id)
    activity_log_service.log_activity(
        db,
        actor_id=user_id,
        action=ActivityAction.TASK_DELETED,
        subject_type=SubjectType.TASK,
        subject_id=task.id,
        details={"text": task.text},
    )
    db.delete(task)
    db.commit()


def _record_progress(
    db: Session, user_id: int, task: Task, value: int, note: str | None
) -> Task:
    task.current_value += value
    apply_limit_progress(task)
    entry = TaskHistory(value=value, note=note)
    task.history.append(entry)
    db.flush()
    action = ActivityAction.TASK_COMPLETED if task.completed else ActivityAction.TASK_PROGRESSED
    activity_log_service.log_activity(
        db,
        actor_id=user_id,
        action=action,
        subject_type=SubjectType.TASK,
        subject_id=task.id,
        details={"value": value, "currentValue": task.current_value},
    )
    db.commit()
    db.refresh(task)
    return task


def add_progress(db: Session, user_id: int, task_id: int, data: ProgressCreate) -> Task:
    """
    Add an increment to a has-limit task and append a history row.

    Raises:
        BusinessRuleError: task has no limit
    """
    task = get_task(db, user_id, task_id)
    if not task.has_limit:
        raise BusinessRuleError("Progress can only be added to tasks with a target.")
    value = data.value if data.value is not None else task.increment_value
    return _record_progress(db, user_id, task, value, data.note)


def toggle_task(db: Session, user_id: int, task_id: int) -> Task:
    """
    Has-limit tasks advance by their increment; binary tasks flip
    completed and record 1 (done) or 0 (undone) in history.
    """
    task = get_task(db, user_id, task_id)
    if task.has_limit:
        return _record_progress(db, user_id, task, task.increment_value, None)

    task.completed = not task.completed
    task.progress = 100 if task.completed else 0
    task.history.append(TaskHistory(value=1 if task.completed else 0))
    db.flush()
    activity_log_service.log_activity(
        db,
        actor_id=user_id,
        action=ActivityAction.TASK_COMPLETED if task.completed else ActivityAction.TASK_UNCOMPLETED,
        subject_type=SubjectType.TASK,
        subject_id=task.id,
    )
    db.commit()
    db.refresh(task)
    return task


def recalculate_from_history(task: Task) -> None:
    """Rebuild current value and completion from the sum of history values."""
    total = sum(entry.value for entry in task.history)
    if task.has_limit:
        task.current_value = total
        apply_limit_progress(task)
    else:
        task.completed = total > 0
        task.progress = 100 if task.completed else 0


def _get_history_entry(task: Task, entry_id: int) -> TaskHistory:
    for entry in task.history:
        if entry.id == entry_id:
            return entry
    raise NotFoundError("History entry not found")


def update_history(
    db: Session, user_id: int, task_id: int, entry_id: int, data: HistoryUpdate
) -> Task:
    task = get_task(db, user_id, task_id)
    entry = _get_history_entry(task, entry_id)
    previous = entry.value
    if "note" in data.model_fields_set:
        entry.note = data.note
    if data.value is not None and data.value != previous:
        entry.value = data.value
        recalculate_from_history(task)
    activity_log_service.log_activity(
        db,
        actor_id=user_id,
        action=ActivityAction.HISTORY_UPDATED,
        subject_type=SubjectType.TASK_HISTORY,
        subject_id=entry.id,
        details={"taskId": task.id, "from": previous, "to": entry.value},
    )
    db.commit()
    db.refresh(task)
    return task


def delete_history(db: Session, user_id: int, task_id: int, entry_id: int) -> Task:
    task = get_task(db, user_id, task_id)
    entry = _get_history_entry(task, entry_id)
    task.history.remove(entry)
    recalculate_from_history(task)
    activity_log_service.log_activity(
        db,
        actor_id=user_id,
        action=ActivityAction.HISTORY_DELETED,
        subject_type=SubjectType.TASK_HISTORY,
        subject_id=entry_id,
        details={"taskId": task.id, "value": entry.value},
    )
    db.commit()
    db.refresh(task)
    return task
