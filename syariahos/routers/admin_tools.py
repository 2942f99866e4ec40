"""Admin router - tool catalog management and export."""

from fastapi import APIRouter, Depends, Query, status
from fastapi.responses import Response
from sqlalchemy.orm import Session

from syariahos.core.deps import get_db, require_admin
from syariahos.db.models import User
from syariahos.routers.admin_users import export_response
from syariahos.schemas.base import DataResponse, MessageDataResponse, MessageResponse
from syariahos.schemas.tool import ToolCreate, ToolRead, ToolUpdate
from syariahos.services import admin_export_service, tool_service
from syariahos.services.admin_export_service import ExportFormat, ExportKind

router = APIRouter(
    prefix="/admin/tools", tags=["Admin - Tools"], dependencies=[Depends(require_admin)]
)


@router.get("", response_model=DataResponse[list[ToolRead]])
def list_tools(db: Session = Depends(get_db)):
    return {"data": tool_service.list_tools(db)}


@router.get("/export")
def export_tools(
    export_format: ExportFormat = Query(ExportFormat.XLSX, alias="format"),
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db),
) -> Response:
    return export_response(
        *admin_export_service.build_export(db, admin.id, ExportKind.TOOLS, export_format)
    )


@router.post(
    "", response_model=MessageDataResponse[ToolRead], status_code=status.HTTP_201_CREATED
)
def create_tool(
    data: ToolCreate,
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    tool = tool_service.create_tool(db, admin.id, data)
    return {"message": "Tool created successfully.", "data": tool}


@router.put("/{tool_id}", response_model=MessageDataResponse[ToolRead])
def update_tool(
    tool_id: int,
    data: ToolUpdate,
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    tool = tool_service.update_tool(db, admin.id, tool_id, data)
    return {"message": "Tool updated successfully.", "data": tool}


@router.delete("/{tool_id}", response_model=MessageResponse)
def delete_tool(
    tool_id: int,
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    tool_service.delete_tool(db, admin.id, tool_id)
    return {"message": "Tool deleted successfully."}
