"""Public tool catalog router."""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from syariahos.core.deps import get_db
from syariahos.schemas.base import DataResponse
from syariahos.schemas.tool import ToolDetail, ToolRead
from syariahos.services import islamic_source_service, tool_service

router = APIRouter(prefix="/tools", tags=["Tools"])


@router.get("", response_model=DataResponse[list[ToolRead]])
def list_tools(
    category: str | None = Query(None),
    db: Session = Depends(get_db),
):
    return {"data": tool_service.list_tools(db, category)}


@router.get("/{tool_id}", response_model=DataResponse[ToolDetail])
async def get_tool(
    tool_id: int,
    resolve: bool = Query(False, description="Expand quran/hadith citations"),
    db: Session = Depends(get_db),
):
    tool = tool_service.get_tool(db, tool_id)
    detail = ToolDetail.model_validate(tool)
    if resolve and tool.sources:
        detail.resolved_sources = await islamic_source_service.resolve_sources(tool.sources)
    return {"data": detail}
