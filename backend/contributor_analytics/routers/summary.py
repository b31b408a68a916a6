import logging
from typing import Literal

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from contributor_analytics.core.db import get_session
from contributor_analytics.schemas.summary import (
    OverallSummaryItem,
    RepoSummaryItem,
    RepoSummaryListResponse,
)
from contributor_analytics.services.repositories.summary_repository import SummaryRepository

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/summaries", tags=["summaries"])


@router.get("/repos/{repo_id:path}", response_model=RepoSummaryListResponse)
async def list_repo_summaries(
    repo_id: str,
    interval_type: Literal["day", "week", "month"] | None = None,
    limit: int = Query(20, ge=1, le=100),
    session: AsyncSession = Depends(get_session),
) -> RepoSummaryListResponse:
    """
    获取仓库最近的摘要（repo_id 形如 owner/name）
    """
    try:
        repo = SummaryRepository(session)
        records = await repo.list_recent_repo_summaries(
            repo_id, interval_type=interval_type, limit=limit
        )
        return RepoSummaryListResponse(
            items=[RepoSummaryItem.model_validate(record) for record in records]
        )
    except Exception as e:
        logger.error(f"获取仓库摘要失败: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"获取失败: {str(e)}")


@router.get("/overall/{interval_type}/{date}", response_model=OverallSummaryItem)
async def get_overall_summary(
    interval_type: Literal["day", "week", "month"],
    date: str,
    session: AsyncSession = Depends(get_session),
) -> OverallSummaryItem:
    """
    获取指定日期的全局摘要（RSS 条目链接指向这里）
    """
    try:
        record = await SummaryRepository(session).get_overall_summary(date, interval_type)
        if record is None:
            raise HTTPException(status_code=404, detail="摘要不存在")
        return OverallSummaryItem.model_validate(record)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"获取全局摘要失败: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"获取失败: {str(e)}")
