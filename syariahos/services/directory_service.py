"""Directory service - per-user tree of Islamic reference material."""

from typing import Any

from sqlalchemy.orm import Session

from syariahos.core.errors import FieldValidationError, NotFoundError
from syariahos.db.enums import ActivityAction, DirectoryItemType, SubjectType
from syariahos.db.models import DirectoryItem
from syariahos.schemas.directory import DirectoryItemCreate, DirectoryItemUpdate
from syariahos.services import activity_log_service


def node_dict(item: DirectoryItem) -> dict[str, Any]:
    return {
        "id": item.id,
        "title": item.title,
        "type": item.type,
        "parent_id": item.parent_id,
        "content": item.content,
        "children": [],
    }


def build_tree(items: list[DirectoryItem]) -> list[dict[str, Any]]:
    """
    Assemble nested nodes from a flat list.

    Siblings are ordered by id. Nodes whose parent is missing from the
    list are treated as roots.
    """
    nodes = {item.id: node_dict(item) for item in sorted(items, key=lambda i: i.id)}
    roots: list[dict[str, Any]] = []
    for node in nodes.values():
        parent = nodes.get(node["parent_id"]) if node["parent_id"] else None
        if parent is None:
            roots.append(node)
        else:
            parent["children"].append(node)
    return roots


def get_tree(db: Session, user_id: int) -> list[dict[str, Any]]:
    items = db.query(DirectoryItem).filter(DirectoryItem.user_id == user_id).all()
    return build_tree(items)


def get_item(db: Session, user_id: int, item_id: int) -> DirectoryItem:
    item = (
        db.query(DirectoryItem)
        .filter(DirectoryItem.id == item_id, DirectoryItem.user_id == user_id)
        .first()
    )
    if not item:
        raise NotFoundError("Directory item not found")
    return item


def _validate_parent(db: Session, user_id: int, parent_id: int) -> DirectoryItem:
    parent = (
        db.query(DirectoryItem)
        .filter(DirectoryItem.id == parent_id, DirectoryItem.user_id == user_id)
        .first()
    )
    if not parent:
        raise FieldValidationError.single("parentId", "The selected parent does not exist.")
    if parent.type != DirectoryItemType.FOLDER.value:
        raise FieldValidationError.single("parentId", "The parent must be a folder.")
    return parent


def _is_descendant(db: Session, user_id: int, candidate_id: int, ancestor_id: int) -> bool:
    """True if candidate_id is ancestor_id itself or sits anywhere below it."""
    parents = dict(
        db.query(DirectoryItem.id, DirectoryItem.parent_id)
        .filter(DirectoryItem.user_id == user_id)
        .all()
    )
    seen: set[int] = set()
    current: int | None = candidate_id
    while current is not None and current not in seen:
        if current == ancestor_id:
            return True
        seen.add(current)
        current = parents.get(current)
    return False


def create_item(db: Session, user_id: int, data: DirectoryItemCreate) -> DirectoryItem:
    if data.parent_id is not None:
        _validate_parent(db, user_id, data.parent_id)

    content = None
    if data.type == DirectoryItemType.ITEM and data.content is not None:
        content = data.content.model_dump(exclude_none=True)

    item = DirectoryItem(
        user_id=user_id,
        parent_id=data.parent_id,
        title=data.title,
        type=data.type.value,
        content=content,
    )
    db.add(item)
    db.flush()
    activity_log_service.log_activity(
        db,
        actor_id=user_id,
        action=ActivityAction.DIRECTORY_ITEM_CREATED,
        subject_type=SubjectType.DIRECTORY_ITEM,
        subject_id=item.id,
    )
    db.commit()
    db.refresh(item)
    return item


def update_item(
    db: Session, user_id: int, item_id: int, data: DirectoryItemUpdate
) -> DirectoryItem:
    """
    Partial update. Moving a node under itself or one of its descendants
    is rejected.
    """
    item = get_item(db, user_id, item_id)
    changes = data.model_fields_set

    if "parent_id" in changes and data.parent_id is not None:
        _validate_parent(db, user_id, data.parent_id)
        if _is_descendant(db, user_id, data.parent_id, item.id):
            raise FieldValidationError.single(
                "parentId", "An item cannot be moved into itself or one of its descendants."
            )

    if "title" in changes and data.title is not None:
        item.title = data.title
    if "parent_id" in changes:
        item.parent_id = data.parent_id
    if "content" in changes and item.type == DirectoryItemType.ITEM.value:
        item.content = data.content.model_dump(exclude_none=True) if data.content else None

    activity_log_service.log_activity(
        db,
        actor_id=user_id,
        action=ActivityAction.DIRECTORY_ITEM_UPDATED,
        subject_type=SubjectType.DIRECTORY_ITEM,
        subject_id=item.id,
    )
    db.commit()
    db.refresh(item)
    return item


def delete_item(db: Session, user_id: int, item_id: int) -> None:
    """Delete a node and its whole subtree."""
    item = get_item(db, user_id, item_id)
    activity_log_service.log_activity(
        db,
        actor_id=user_id,
        action=ActivityAction.DIRECTORY_ITEM_DELETED,
        subject_type=SubjectType.DIRECTORY_ITEM,
        subject_id=item.id,
        details={"title": item.title},
    )
    db.delete(item)
    db.commit()
