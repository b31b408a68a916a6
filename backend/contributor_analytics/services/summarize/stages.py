"""三种粒度共用的流水线步骤"""

from __future__ import annotations

from collections.abc import Sequence

from contributor_analytics.services.intervals import IntervalType, iter_intervals
from contributor_analytics.services.steps import Step, create_step
from contributor_analytics.services.summarize.context import (
    IntervalTask,
    SummarizerPipelineContext,
    SummaryOutcome,
)


def generate_time_intervals(granularity: IntervalType) -> Step:
    """输入仓库 ID（或 overall），输出该粒度下运行日期范围内的所有区间"""

    def run(target: str, context: SummarizerPipelineContext) -> list[IntervalTask]:
        return [
            IntervalTask(interval=interval, target=target)
            for interval in iter_intervals(granularity, context.date_range)
        ]

    return create_step(f"Generate {granularity} intervals", run)


def interval_gate(granularity: IntervalType) -> Step:
    """对应粒度未开启时返回空列表"""

    def run(tasks: list[IntervalTask], context: SummarizerPipelineContext) -> list[IntervalTask]:
        if context.enabled_intervals.is_enabled(granularity):
            return tasks
        context.logger.debug(f"{granularity} 摘要未开启，跳过 {len(tasks)} 个区间")
        return []

    return create_step(f"Check {granularity} enabled", run)


def filter_results(results: Sequence[SummaryOutcome | None]) -> list[SummaryOutcome]:
    """只保留成功生成的结果，保持原有顺序"""
    return [
        result for result in results
        if result is not None and result.status == "generated"
    ]


filter_results_step = create_step(
    "Filter skipped and failed results",
    lambda results, context: filter_results(results),
)
