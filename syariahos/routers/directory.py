"""Directory router - the caller's reference tree."""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from syariahos.core.deps import get_current_user, get_db
from syariahos.db.models import User
from syariahos.schemas.base import DataResponse, MessageResponse
from syariahos.schemas.directory import (
    DirectoryItemCreate,
    DirectoryItemUpdate,
    DirectoryNode,
)
from syariahos.services import directory_service

router = APIRouter(prefix="/directory", tags=["Directory"])


@router.get("", response_model=DataResponse[list[DirectoryNode]])
def get_tree(
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Full tree, assembled from one flat query."""
    return {"data": directory_service.get_tree(db, user.id)}


@router.post(
    "", response_model=DataResponse[DirectoryNode], status_code=status.HTTP_201_CREATED
)
def create_item(
    data: DirectoryItemCreate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    item = directory_service.create_item(db, user.id, data)
    return {"data": directory_service.node_dict(item)}


@router.put("/{item_id}", response_model=DataResponse[DirectoryNode])
def update_item(
    item_id: int,
    data: DirectoryItemUpdate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    item = directory_service.update_item(db, user.id, item_id, data)
    return {"data": directory_service.node_dict(item)}


@router.delete("/{item_id}", response_model=MessageResponse)
def delete_item(
    item_id: int,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    directory_service.delete_item(db, user.id, item_id)
    return {"message": "Directory item deleted successfully"}
