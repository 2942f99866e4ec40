"""Tool catalog service - public reads, admin CRUD."""

from typing import Any

from sqlalchemy.orm import Session

from syariahos.core.errors import NotFoundError
from syariahos.db.enums import ActivityAction, SubjectType
from syariahos.db.models import Tool
from syariahos.schemas.tool import ToolCreate, ToolUpdate
from syariahos.services import activity_log_service


def _column_values(data: ToolCreate | ToolUpdate, fields: set[str]) -> dict[str, Any]:
    values = data.model_dump(include=fields, mode="json")
    if "sources" in values and values["sources"] is not None:
        values["sources"] = [
            {k: v for k, v in source.items() if v is not None} for source in values["sources"]
        ]
    return values


def list_tools(db: Session, category: str | None = None) -> list[Tool]:
    query = db.query(Tool)
    if category:
        query = query.filter(Tool.category == category)
    return query.order_by(Tool.name, Tool.id).all()


def get_tool(db: Session, tool_id: int) -> Tool:
    tool = db.query(Tool).filter(Tool.id == tool_id).first()
    if not tool:
        raise NotFoundError("Tool not found")
    return tool


def create_tool(db: Session, actor_id: int, data: ToolCreate) -> Tool:
    tool = Tool(**_column_values(data, set(ToolCreate.model_fields)))
    db.add(tool)
    db.flush()
    activity_log_service.log_activity(
        db,
        actor_id=actor_id,
        action=ActivityAction.ADMIN_TOOL_CREATED,
        subject_type=SubjectType.TOOL,
        subject_id=tool.id,
        details={"name": tool.name},
    )
    db.commit()
    db.refresh(tool)
    return tool


def update_tool(db: Session, actor_id: int, tool_id: int, data: ToolUpdate) -> Tool:
    tool = get_tool(db, tool_id)
    fields = set(data.model_fields_set)
    for field, value in _column_values(data, fields).items():
        if value is None and field in ("name", "category", "description"):
            continue
        setattr(tool, field, value)
    activity_log_service.log_activity(
        db,
        actor_id=actor_id,
        action=ActivityAction.ADMIN_TOOL_UPDATED,
        subject_type=SubjectType.TOOL,
        subject_id=tool.id,
        details={"fields": sorted(fields)},
    )
    db.commit()
    db.refresh(tool)
    return tool


def delete_tool(db: Session, actor_id: int, tool_id: int) -> None:
    tool = get_tool(db, tool_id)
    activity_log_service.log_activity(
        db,
        actor_id=actor_id,
        action=ActivityAction.ADMIN_TOOL_DELETED,
        subject_type=SubjectType.TOOL,
        subject_id=tool.id,
        details={"name": tool.name},
    )
    db.delete(tool)
    db.commit()
