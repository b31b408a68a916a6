"""全局摘要流水线，结果供 RSS 使用"""

from __future__ import annotations

from contributor_analytics.services.fs_helpers import file_exists, get_overall_file_path, write_to_file
from contributor_analytics.services.intervals import IntervalType
from contributor_analytics.services.metrics import get_overall_metrics
from contributor_analytics.services.repositories.summary_repository import SummaryRepository
from contributor_analytics.services.steps import Step, create_step, map_step, pipe
from contributor_analytics.services.summarize.context import (
    IntervalTask,
    SummarizerPipelineContext,
    SummaryOutcome,
)
from contributor_analytics.services.summarize.repo_summary import SUMMARY_CATEGORY, summary_filename
from contributor_analytics.services.summarize.stages import (
    filter_results_step,
    generate_time_intervals,
    interval_gate,
)


async def generate_overall_summary_for_interval(
    task: IntervalTask,
    context: SummarizerPipelineContext,
) -> SummaryOutcome:
    interval = task.interval
    logger = context.logger

    if not context.ai_summary_config.enabled:
        logger.debug(f"AI 摘要未开启，跳过 {interval.interval_type} 全局摘要")
        return SummaryOutcome.skipped(task, "AI summary disabled")

    date_range = interval.date_range
    interval_logger = logger.getChild("overall").getChild(interval.interval_type).getChild(
        date_range.start_date
    )
    output_path = None
    if context.output_dir:
        output_path = get_overall_file_path(
            context.output_dir,
            SUMMARY_CATEGORY,
            interval.interval_type,
            summary_filename(date_range.start_date),
        )

    try:
        if not context.overwrite and output_path is not None and file_exists(output_path):
            interval_logger.debug(f"{date_range.start_date} 的 {interval.interval_type} 全局摘要已存在，跳过")
            return SummaryOutcome.skipped(task, "summary already exists")

        metrics = await get_overall_metrics(context.session, date_range=date_range)

        summary = await context.summarizer.generate_overall_summary(
            metrics,
            context.ai_summary_config,
            date_range,
            interval.interval_type,
        )
        if not summary:
            interval_logger.debug(f"{date_range.start_date} 没有任何活动，跳过全局摘要")
            return SummaryOutcome.skipped(task, "no activity")

        await SummaryRepository(context.session).store_overall_summary(
            date_range.start_date,
            summary,
            interval.interval_type,
        )

        if output_path is not None:
            write_to_file(output_path, summary)

        interval_logger.info(f"已生成 {interval.interval_type} 全局摘要 {date_range.start_date}")
        return SummaryOutcome.generated(task, summary)
    except Exception as e:
        await context.session.rollback()
        interval_logger.error(f"生成全局摘要时出错: {e}", exc_info=True)
        return SummaryOutcome.failed(task, str(e))


def build_overall_summary_pipeline(granularity: IntervalType) -> Step:
    return pipe(
        generate_time_intervals(granularity),
        interval_gate(granularity),
        map_step(create_step("OverallSummary", generate_overall_summary_for_interval)),
        filter_results_step,
        name=f"{granularity} overall summaries",
    )


generate_daily_overall_summaries = build_overall_summary_pipeline("day")
generate_weekly_overall_summaries = build_overall_summary_pipeline("week")
generate_monthly_overall_summaries = build_overall_summary_pipeline("month")
