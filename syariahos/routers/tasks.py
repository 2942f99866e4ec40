"""Tasks router - CRUD, toggle, progress and history corrections."""

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from syariahos.core.deps import get_current_user, get_db
from syariahos.db.enums import ResetCycle
from syariahos.db.models import User
from syariahos.schemas.base import DataResponse, MessageDataResponse, MessageResponse
from syariahos.schemas.task import (
    HistoryUpdate,
    ProgressCreate,
    TaskCreate,
    TaskRead,
    TaskUpdate,
)
from syariahos.services import task_service

router = APIRouter(prefix="/tasks", tags=["Tasks"])


@router.get("", response_model=DataResponse[list[TaskRead]])
def list_tasks(
    category: str | None = Query(None),
    search: str | None = Query(None, max_length=255),
    cycle: ResetCycle | None = Query(None),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """List the caller's tasks (newest first)."""
    tasks = task_service.list_tasks(
        db,
        user.id,
        category=category,
        search=search,
        cycle=cycle.value if cycle else None,
    )
    return {"data": tasks}


@router.post(
    "", response_model=MessageDataResponse[TaskRead], status_code=status.HTTP_201_CREATED
)
def create_task(
    data: TaskCreate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    task = task_service.create_task(db, user.id, data)
    return {"message": "Task created successfully", "data": task}


@router.get("/{task_id}", response_model=DataResponse[TaskRead])
def get_task(
    task_id: int,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return {"data": task_service.get_task(db, user.id, task_id)}


@router.put("/{task_id}", response_model=MessageDataResponse[TaskRead])
def update_task(
    task_id: int,
    data: TaskUpdate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    task = task_service.update_task(db, user.id, task_id, data)
    return {"message": "Task updated successfully", "data": task}


@router.delete("/{task_id}", response_model=MessageResponse)
def delete_task(
    task_id: int,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    task_service.delete_task(db, user.id, task_id)
    return {"message": "Task deleted successfully"}


@router.patch("/{task_id}/toggle", response_model=MessageDataResponse[TaskRead])
def toggle_task(
    task_id: int,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    task = task_service.toggle_task(db, user.id, task_id)
    return {"message": "Task toggled successfully", "data": task}


@router.post("/{task_id}/progress", response_model=MessageDataResponse[TaskRead])
def add_progress(
    task_id: int,
    data: ProgressCreate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Add an increment to a task with a target."""
    task = task_service.add_progress(db, user.id, task_id, data)
    return {"message": "Progress added successfully", "data": task}


@router.put("/{task_id}/history/{entry_id}", response_model=MessageDataResponse[TaskRead])
def update_history(
    task_id: int,
    entry_id: int,
    data: HistoryUpdate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    task = task_service.update_history(db, user.id, task_id, entry_id, data)
    return {"message": "History entry updated successfully", "data": task}


@router.delete("/{task_id}/history/{entry_id}", response_model=MessageDataResponse[TaskRead])
def delete_history(
    task_id: int,
    entry_id: int,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    task = task_service.delete_history(db, user.id, task_id, entry_id)
    return {"message": "History entry deleted successfully", "data": task}
