from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from contributor_analytics.core.config import Settings, settings as default_settings
from contributor_analytics.core.db import get_sessionmaker
from contributor_analytics.models.activity import Repository
from contributor_analytics.services.intervals import INTERVAL_TYPES, DateRange
from contributor_analytics.services.summarize.context import (
    OVERALL_TARGET,
    Summarizer,
    SummarizerPipelineContext,
    SummaryOutcome,
)
from contributor_analytics.services.summarize.overall_summary import (
    generate_daily_overall_summaries,
    generate_monthly_overall_summaries,
    generate_weekly_overall_summaries,
)
from contributor_analytics.services.summarize.repo_summary import (
    generate_daily_repo_summaries,
    generate_monthly_repo_summaries,
    generate_weekly_repo_summaries,
)

logger = logging.getLogger(__name__)

REPO_PIPELINES = {
    "day": generate_daily_repo_summaries,
    "week": generate_weekly_repo_summaries,
    "month": generate_monthly_repo_summaries,
}

OVERALL_PIPELINES = {
    "day": generate_daily_overall_summaries,
    "week": generate_weekly_overall_summaries,
    "month": generate_monthly_overall_summaries,
}


@dataclass
class RunReport:
    date_range: DateRange
    repositories: list[str] = field(default_factory=list)
    generated: list[SummaryOutcome] = field(default_factory=list)

    def count(self, target: str | None = None, interval_type: str | None = None) -> int:
        return sum(
            1 for outcome in self.generated
            if (target is None or outcome.target == target)
            and (interval_type is None or outcome.interval.interval_type == interval_type)
        )

    def as_dict(self) -> dict:
        return {
            "start_date": self.date_range.start_date,
            "end_date": self.date_range.end_date,
            "repositories": self.repositories,
            "generated": {
                "repositories": {
                    interval_type: sum(
                        self.count(repo_id, interval_type) for repo_id in self.repositories
                    )
                    for interval_type in INTERVAL_TYPES
                },
                "overall": {
                    interval_type: self.count(OVERALL_TARGET, interval_type)
                    for interval_type in INTERVAL_TYPES
                },
            },
        }


async def resolve_repositories(session: AsyncSession, settings: Settings) -> list[str]:
    """配置了 tracked_repositories 时使用配置，否则使用数据库中的全部仓库"""
    if settings.tracked_repositories:
        return list(settings.tracked_repositories)
    result = await session.execute(select(Repository.id).order_by(Repository.id))
    return list(result.scalars().all())


class SummaryPipeline:
    def __init__(
        self,
        settings: Settings | None = None,
        session_maker: async_sessionmaker[AsyncSession] | None = None,
        summarizer: Summarizer | None = None,
    ) -> None:
        self._settings = settings or default_settings
        self._session_maker = session_maker
        self._summarizer = summarizer

    async def run_once(
        self,
        *,
        date_range: DateRange | None = None,
        overwrite: bool | None = None,
        repositories: Sequence[str] | None = None,
    ) -> RunReport:
        session_maker = self._session_maker or get_sessionmaker()
        async with session_maker() as session:
            context = SummarizerPipelineContext.from_settings(
                self._settings,
                session,
                date_range=date_range,
                overwrite=overwrite,
                summarizer=self._summarizer,
            )
            repo_ids = list(repositories) if repositories is not None else await resolve_repositories(
                session, self._settings
            )
            report = RunReport(date_range=context.date_range, repositories=repo_ids)

            logger.info(
                f"开始生成摘要: {len(repo_ids)} 个仓库, "
                f"{context.date_range.start_date} ~ {context.date_range.end_date}, overwrite={context.overwrite}"
            )

            for repo_id in repo_ids:
                for interval_type in INTERVAL_TYPES:
                    report.generated.extend(await REPO_PIPELINES[interval_type](repo_id, context))

            for interval_type in INTERVAL_TYPES:
                report.generated.extend(await OVERALL_PIPELINES[interval_type](OVERALL_TARGET, context))

            logger.info(f"摘要生成完成，共生成 {len(report.generated)} 条摘要")
            return report


summary_pipeline = SummaryPipeline()
