"""Admin router - user management and user export."""

from fastapi import APIRouter, Depends, Query, status
from fastapi.responses import Response
from sqlalchemy.orm import Session

from syariahos.core.deps import get_db, require_admin
from syariahos.db.models import User
from syariahos.schemas.base import MessageDataResponse, MessageResponse, PaginatedResponse
from syariahos.schemas.user import AdminUserCreate, AdminUserUpdate, UserRead
from syariahos.services import admin_export_service, user_service
from syariahos.services.admin_export_service import ExportFormat, ExportKind
from syariahos.utils.pagination import PaginationParams, get_pagination, paginated

router = APIRouter(
    prefix="/admin/users", tags=["Admin - Users"], dependencies=[Depends(require_admin)]
)


def export_response(content: str, media_type: str, filename: str) -> Response:
    headers = {"Content-Disposition": f'attachment; filename="{filename}"'}
    return Response(content=content, media_type=media_type, headers=headers)


@router.get("", response_model=PaginatedResponse[UserRead])
def list_users(
    search: str | None = Query(None, max_length=255),
    pagination: PaginationParams = Depends(get_pagination),
    db: Session = Depends(get_db),
):
    """Users newest first, 15 per page, searchable by name or email."""
    users, total = user_service.list_users(db, pagination, search)
    return paginated(users, total, pagination)


@router.get("/export")
def export_users(
    export_format: ExportFormat = Query(ExportFormat.XLSX, alias="format"),
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db),
) -> Response:
    return export_response(
        *admin_export_service.build_export(db, admin.id, ExportKind.USERS, export_format)
    )


@router.post(
    "", response_model=MessageDataResponse[UserRead], status_code=status.HTTP_201_CREATED
)
def create_user(
    data: AdminUserCreate,
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    user = user_service.admin_create_user(db, admin.id, data)
    return {"message": "User created successfully.", "data": user}


@router.put("/{user_id}", response_model=MessageDataResponse[UserRead])
def update_user(
    user_id: int,
    data: AdminUserUpdate,
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    user = user_service.admin_update_user(db, admin.id, user_id, data)
    return {"message": "User updated successfully.", "data": user}


@router.delete("/{user_id}", response_model=MessageResponse)
def delete_user(
    user_id: int,
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """Delete a user and their data. The last admin cannot be deleted."""
    user_service.admin_delete_user(db, admin.id, user_id)
    return {"message": "User deleted successfully."}
