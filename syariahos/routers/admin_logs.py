"""Admin router - activity log viewer."""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from syariahos.core.deps import get_db, require_admin
from syariahos.schemas.admin import ActivityLogRead
from syariahos.schemas.base import PaginatedResponse
from syariahos.services import activity_log_service
from syariahos.utils.pagination import PaginationParams, get_pagination, paginated

router = APIRouter(
    prefix="/admin/logs", tags=["Admin - Logs"], dependencies=[Depends(require_admin)]
)


@router.get("", response_model=PaginatedResponse[ActivityLogRead])
def list_logs(
    action: str | None = Query(None, description="Filter by action, e.g. task.created"),
    user_id: int | None = Query(None, description="Filter by actor"),
    pagination: PaginationParams = Depends(get_pagination),
    db: Session = Depends(get_db),
):
    """Newest first, 15 per page."""
    logs, total = activity_log_service.list_logs(db, pagination, action=action, user_id=user_id)
    return paginated(logs, total, pagination)
