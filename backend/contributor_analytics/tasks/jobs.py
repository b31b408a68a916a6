"""定时任务"""

import logging

from contributor_analytics.services.summarize.runner import summary_pipeline

logger = logging.getLogger(__name__)


async def generate_summaries_job() -> None:
    """每天生成日/周/月摘要的定时任务"""
    logger.info("开始执行摘要生成任务...")
    try:
        report = await summary_pipeline.run_once()
        logger.info(f"摘要生成任务完成: {report.as_dict()['generated']}")
    except Exception as e:
        logger.error(f"生成摘要时出错: {e}", exc_info=True)
