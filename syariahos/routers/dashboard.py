"""Dashboard router - aggregated KPI, goal and trend payload."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from syariahos.core.deps import get_current_user, get_db
from syariahos.db.models import User
from syariahos.schemas.base import DataResponse
from syariahos.schemas.dashboard import DashboardRead
from syariahos.services import dashboard_service

router = APIRouter(prefix="/dashboard", tags=["Dashboard"])


@router.get("", response_model=DataResponse[DashboardRead])
def get_dashboard(
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return {"data": dashboard_service.get_dashboard_data(db, user.id)}
