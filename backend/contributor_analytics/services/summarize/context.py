"""摘要流水线的上下文与结果类型"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Literal, Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from contributor_analytics.core.config import Settings
from contributor_analytics.services.intervals import (
    DateRange,
    IntervalType,
    TimeInterval,
    default_date_range,
)
from contributor_analytics.services.metrics import OverallMetrics, RepoMetrics
from contributor_analytics.services.summarize.summarizer import RepoSummarizer
from contributor_analytics.services.summary_client import AISummaryConfig

OVERALL_TARGET = "overall"

OutcomeStatus = Literal["generated", "skipped", "failed"]


class Summarizer(Protocol):
    async def generate_repo_summary(
        self,
        metrics: RepoMetrics,
        config: AISummaryConfig,
        date_range: DateRange,
        interval_type: IntervalType,
    ) -> str | None: ...

    async def generate_overall_summary(
        self,
        metrics: OverallMetrics,
        config: AISummaryConfig,
        date_range: DateRange,
        interval_type: IntervalType,
    ) -> str | None: ...


@dataclass(frozen=True)
class EnabledIntervals:
    day: bool = True
    week: bool = True
    month: bool = True

    def is_enabled(self, interval_type: IntervalType) -> bool:
        return getattr(self, interval_type)


@dataclass(frozen=True)
class IntervalTask:
    """单个待处理的区间，target 为仓库 ID 或 OVERALL_TARGET"""

    interval: TimeInterval
    target: str


@dataclass(frozen=True)
class SummaryOutcome:
    status: OutcomeStatus
    interval: TimeInterval
    target: str
    summary: str | None = None
    detail: str | None = None

    @property
    def date(self) -> str:
        return self.interval.date_range.start_date

    @classmethod
    def generated(cls, task: IntervalTask, summary: str) -> "SummaryOutcome":
        return cls("generated", task.interval, task.target, summary=summary)

    @classmethod
    def skipped(cls, task: IntervalTask, detail: str) -> "SummaryOutcome":
        return cls("skipped", task.interval, task.target, detail=detail)

    @classmethod
    def failed(cls, task: IntervalTask, detail: str) -> "SummaryOutcome":
        return cls("failed", task.interval, task.target, detail=detail)


@dataclass
class SummarizerPipelineContext:
    session: AsyncSession
    ai_summary_config: AISummaryConfig
    date_range: DateRange
    enabled_intervals: EnabledIntervals = field(default_factory=EnabledIntervals)
    overwrite: bool = False
    output_dir: str | None = None
    summarizer: Summarizer = field(default_factory=RepoSummarizer)
    logger: logging.Logger = field(
        default_factory=lambda: logging.getLogger("contributor_analytics.summaries")
    )

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        session: AsyncSession,
        *,
        date_range: DateRange | None = None,
        overwrite: bool | None = None,
        summarizer: Summarizer | None = None,
    ) -> "SummarizerPipelineContext":
        return cls(
            session=session,
            ai_summary_config=AISummaryConfig(
                enabled=settings.ai_summary_enabled,
                api_key=settings.ai_api_key,
                endpoint=settings.ai_endpoint,
                model=settings.ai_model,
                temperature=settings.ai_temperature,
                max_tokens=settings.ai_max_tokens,
                project_context=settings.ai_project_context,
            ),
            date_range=date_range or default_date_range(settings.summary_days_back),
            enabled_intervals=EnabledIntervals(
                day=settings.summary_day_enabled,
                week=settings.summary_week_enabled,
                month=settings.summary_month_enabled,
            ),
            overwrite=settings.overwrite_summaries if overwrite is None else overwrite,
            output_dir=settings.output_dir,
            summarizer=summarizer or RepoSummarizer(),
        )
