"""Categories router."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from syariahos.core.deps import get_current_user, get_db
from syariahos.db.models import User
from syariahos.schemas.base import DataResponse
from syariahos.schemas.task import CategoryRead
from syariahos.services import category_service

router = APIRouter(prefix="/categories", tags=["Categories"])


@router.get("", response_model=DataResponse[list[CategoryRead]])
def list_categories(
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return {"data": category_service.list_categories(db, user.id)}
