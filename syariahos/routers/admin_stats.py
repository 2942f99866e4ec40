"""Admin router - platform statistics and stats export."""

from fastapi import APIRouter, Depends, Query
from fastapi.responses import Response
from sqlalchemy.orm import Session

from syariahos.core.deps import get_db, require_admin
from syariahos.db.models import User
from syariahos.routers.admin_users import export_response
from syariahos.schemas.admin import StatsRead, UserGrowthRead
from syariahos.schemas.base import DataResponse
from syariahos.services import admin_export_service, stats_service
from syariahos.services.admin_export_service import ExportFormat, ExportKind

router = APIRouter(
    prefix="/admin/stats", tags=["Admin - Stats"], dependencies=[Depends(require_admin)]
)


@router.get("", response_model=DataResponse[StatsRead])
def get_stats(db: Session = Depends(get_db)):
    return {"data": stats_service.get_stats(db)}


@router.get("/user-growth", response_model=DataResponse[UserGrowthRead])
def get_user_growth(db: Session = Depends(get_db)):
    """Registrations and activity for the last six months."""
    return {"data": stats_service.get_user_growth(db)}


@router.get("/export")
def export_stats(
    export_format: ExportFormat = Query(ExportFormat.XLSX, alias="format"),
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db),
) -> Response:
    return export_response(
        *admin_export_service.build_export(db, admin.id, ExportKind.STATS, export_format)
    )
