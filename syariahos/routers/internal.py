"""
Internal endpoints for scheduled/cron operations.

Protected by X-Internal-Secret header.
Call from an external scheduler (cron, cloud trigger).
"""

import hmac

from fastapi import APIRouter, Depends, Header, HTTPException
from pydantic import BaseModel
from sqlalchemy.orm import Session

from syariahos.core.config import settings
from syariahos.core.deps import get_db
from syariahos.services import task_reset_service

router = APIRouter(prefix="/internal/scheduled", tags=["internal"])


def verify_internal_secret(x_internal_secret: str = Header(...)):
    """Verify the internal secret header."""
    expected = settings.INTERNAL_SECRET
    if not expected:
        raise HTTPException(status_code=501, detail="INTERNAL_SECRET not configured")
    if not hmac.compare_digest(x_internal_secret, expected):
        raise HTTPException(status_code=403, detail="Invalid internal secret")


class ResetTasksResponse(BaseModel):
    tasks_reset: int


@router.post("/reset-tasks", response_model=ResetTasksResponse)
def reset_tasks(
    x_internal_secret: str = Header(...),
    db: Session = Depends(get_db),
):
    """Reset every recurring task whose cycle has elapsed."""
    verify_internal_secret(x_internal_secret)
    count = task_reset_service.reset_eligible_tasks(db)
    return ResetTasksResponse(tasks_reset=count)
