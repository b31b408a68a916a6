"""仓库摘要流水线（日/周/月）"""

from __future__ import annotations

from contributor_analytics.services.fs_helpers import file_exists, get_repo_file_path, write_to_file
from contributor_analytics.services.intervals import IntervalType
from contributor_analytics.services.metrics import get_repo_metrics
from contributor_analytics.services.repositories.summary_repository import SummaryRepository
from contributor_analytics.services.steps import Step, create_step, map_step, pipe
from contributor_analytics.services.summarize.context import (
    IntervalTask,
    SummarizerPipelineContext,
    SummaryOutcome,
)
from contributor_analytics.services.summarize.stages import (
    filter_results_step,
    generate_time_intervals,
    interval_gate,
)

SUMMARY_CATEGORY = "summaries"


def summary_filename(date: str) -> str:
    return f"{date}.md"


def check_existing_summary(
    repo_id: str,
    date: str,
    interval_type: IntervalType,
    output_dir: str | None,
) -> bool:
    """导出文件是否已存在；未配置 output_dir 时视为不存在"""
    if not output_dir:
        return False
    path = get_repo_file_path(output_dir, repo_id, SUMMARY_CATEGORY, interval_type, summary_filename(date))
    return file_exists(path)


async def generate_repo_summary_for_interval(
    task: IntervalTask,
    context: SummarizerPipelineContext,
) -> SummaryOutcome:
    interval = task.interval
    repo_id = task.target
    logger = context.logger

    if not context.ai_summary_config.enabled:
        logger.debug(f"AI 摘要未开启，跳过 {repo_id} 的 {interval.interval_type} 摘要")
        return SummaryOutcome.skipped(task, "AI summary disabled")

    date_range = interval.date_range
    interval_logger = logger.getChild(interval.interval_type).getChild(date_range.start_date)

    try:
        # 非覆盖模式下，已导出过的区间直接跳过
        if not context.overwrite and check_existing_summary(
            repo_id, date_range.start_date, interval.interval_type, context.output_dir
        ):
            interval_logger.debug(
                f"{repo_id} 在 {date_range.start_date} 的 {interval.interval_type} 摘要已存在，跳过"
            )
            return SummaryOutcome.skipped(task, "summary already exists")

        metrics = await get_repo_metrics(context.session, repository=repo_id, date_range=date_range)

        summary = await context.summarizer.generate_repo_summary(
            metrics,
            context.ai_summary_config,
            date_range,
            interval.interval_type,
        )
        if not summary:
            interval_logger.debug(f"{repo_id} 在 {date_range.start_date} 没有活动，跳过摘要生成")
            return SummaryOutcome.skipped(task, "no activity")

        await SummaryRepository(context.session).store_repo_summary(
            repo_id,
            date_range.start_date,
            summary,
            interval.interval_type,
        )

        if context.output_dir:
            output_path = get_repo_file_path(
                context.output_dir,
                repo_id,
                SUMMARY_CATEGORY,
                interval.interval_type,
                summary_filename(date_range.start_date),
            )
            write_to_file(output_path, summary)
            interval_logger.info(
                f"已生成并导出 {repo_id} 的 {interval.interval_type} 摘要: {output_path}"
            )
        else:
            interval_logger.info(f"已生成 {repo_id} 的 {interval.interval_type} 摘要（未配置导出目录）")

        return SummaryOutcome.generated(task, summary)
    except Exception as e:
        await context.session.rollback()
        interval_logger.error(f"处理仓库 {repo_id} 时出错: {e}", exc_info=True)
        return SummaryOutcome.failed(task, str(e))


generate_repo_summary_step = create_step("RepoSummary", generate_repo_summary_for_interval)


def build_repo_summary_pipeline(granularity: IntervalType) -> Step:
    return pipe(
        generate_time_intervals(granularity),
        interval_gate(granularity),
        map_step(generate_repo_summary_step),
        filter_results_step,
        name=f"{granularity} repo summaries",
    )


generate_daily_repo_summaries = build_repo_summary_pipeline("day")
generate_weekly_repo_summaries = build_repo_summary_pipeline("week")
generate_monthly_repo_summaries = build_repo_summary_pipeline("month")
