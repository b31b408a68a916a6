"""定时触发入口（供外部 cron 调用）"""

import logging

from fastapi import APIRouter, Header, HTTPException, Query

from contributor_analytics.core.config import settings
from contributor_analytics.schemas.summary import SummaryRunResponse
from contributor_analytics.services.intervals import DateRange, InvalidDateRangeError, default_date_range
from contributor_analytics.services.summarize import runner

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/cron", tags=["cron"])


def _check_authorization(authorization: str | None) -> None:
    if not settings.cron_secret:
        return
    if authorization != f"Bearer {settings.cron_secret}":
        raise HTTPException(status_code=401, detail="未授权")


@router.post("/summaries", response_model=SummaryRunResponse)
async def run_summaries(
    overwrite: bool | None = None,
    days: int | None = Query(None, ge=1, le=366),
    authorization: str | None = Header(None),
) -> SummaryRunResponse:
    """
    运行日/周/月摘要流水线
    """
    _check_authorization(authorization)

    try:
        date_range: DateRange | None = default_date_range(days) if days else None
        report = await runner.summary_pipeline.run_once(date_range=date_range, overwrite=overwrite)
        return SummaryRunResponse(**report.as_dict())
    except InvalidDateRangeError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.error(f"运行摘要流水线失败: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"运行失败: {str(e)}")
