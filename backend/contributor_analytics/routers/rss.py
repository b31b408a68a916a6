"""RSS 路由"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Response
from sqlalchemy.ext.asyncio import AsyncSession

from contributor_analytics.core.config import settings
from contributor_analytics.core.db import get_session
from contributor_analytics.services.feed import build_feed

logger = logging.getLogger(__name__)

router = APIRouter(tags=["rss"])

# 缓存一小时
CACHE_CONTROL = "public, max-age=3600"


@router.get("/rss.xml")
async def get_rss_feed(session: AsyncSession = Depends(get_session)) -> Response:
    try:
        rss = await build_feed(session, settings.site_url)
    except Exception as e:
        logger.error(f"生成 RSS 失败: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="生成 RSS 失败")

    return Response(
        content=rss,
        media_type="application/xml",
        headers={"Cache-Control": CACHE_CONTROL},
    )
