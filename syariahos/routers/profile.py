"""Profile router - preferences, data export and data reset."""

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from syariahos.core.deps import get_current_user, get_db
from syariahos.db.models import User
from syariahos.schemas.base import DataResponse, MessageDataResponse
from syariahos.schemas.user import ProfileUpdate, UserRead
from syariahos.services import profile_service

router = APIRouter(prefix="/profile", tags=["Profile"])


@router.get("", response_model=DataResponse[UserRead])
def get_profile(user: User = Depends(get_current_user)):
    return {"data": user}


@router.put("", response_model=MessageDataResponse[UserRead])
def update_profile(
    data: ProfileUpdate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    user = profile_service.update_profile(db, user, data)
    return {"message": "Profile updated successfully", "data": user}


@router.post("/export")
def export_data(
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> JSONResponse:
    """Download everything the user owns as a JSON file."""
    payload = profile_service.export_user_data(db, user)
    filename = profile_service.export_filename()
    return JSONResponse(
        content=payload,
        headers={
            "Content-Disposition": f'attachment; filename="{filename}"',
            "Cache-Control": "no-cache, no-store, must-revalidate",
        },
    )


@router.post("/reset", response_model=MessageDataResponse[UserRead])
def reset_data(
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Delete tasks and categories, reseed defaults, restore preferences."""
    user = profile_service.reset_user_data(db, user)
    return {"message": "All your data has been reset successfully", "data": user}
