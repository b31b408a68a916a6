"""全局摘要与整体运行测试"""

import asyncio
from datetime import date, datetime

from sqlalchemy import select

from contributor_analytics.core.config import Settings
from contributor_analytics.models.activity import Commit
from contributor_analytics.models.summary import OverallSummary, RepoSummary
from contributor_analytics.services.intervals import DateRange, TimeInterval, default_date_range
from contributor_analytics.services.summarize.context import (
    OVERALL_TARGET,
    IntervalTask,
    SummarizerPipelineContext,
)
from contributor_analytics.services.summarize.overall_summary import generate_overall_summary_for_interval
from contributor_analytics.services.summarize.runner import SummaryPipeline
from contributor_analytics.services.summary_client import AISummaryConfig

JANUARY = DateRange("2024-01-01", "2024-02-01")


def test_overall_summary_is_stored_and_exported(database, seed_activity, fake_summarizer, tmp_path):
    interval = TimeInterval("week", date(2024, 1, 1), date(2024, 1, 8))

    async def scenario():
        async with database() as session_maker, session_maker() as session:
            await seed_activity(session, "acme/api", date(2024, 1, 3))
            context = SummarizerPipelineContext(
                session=session,
                ai_summary_config=AISummaryConfig(enabled=True),
                date_range=JANUARY,
                output_dir=str(tmp_path),
                summarizer=fake_summarizer,
            )
            outcome = await generate_overall_summary_for_interval(
                IntervalTask(interval, OVERALL_TARGET), context
            )
            rows = (await session.execute(select(OverallSummary))).scalars().all()
            return outcome, rows

    outcome, rows = asyncio.run(scenario())

    assert outcome.status == "generated"
    assert [(r.date, r.interval_type, r.summary) for r in rows] == [("2024-01-01", "week", "Great progress")]
    assert (tmp_path / "summaries" / "week" / "2024-01-01.md").read_text(encoding="utf-8") == "Great progress"
    assert fake_summarizer.overall_calls == [("2024-01-01", "week")]


def test_run_once_covers_every_repository_and_granularity(database, seed_activity, fake_summarizer, tmp_path):
    settings = Settings(ai_summary_enabled=True, output_dir=str(tmp_path))

    async def scenario():
        async with database() as session_maker:
            async with session_maker() as session:
                await seed_activity(session, "acme/api", date(2024, 1, 1))
                await seed_activity(session, "acme/web", date(2024, 1, 2))

            pipeline = SummaryPipeline(settings, session_maker=session_maker, summarizer=fake_summarizer)
            report = await pipeline.run_once(date_range=JANUARY)

            async with session_maker() as session:
                repo_rows = (await session.execute(select(RepoSummary))).scalars().all()
            return report, repo_rows

    report, repo_rows = asyncio.run(scenario())

    assert report.repositories == ["acme/api", "acme/web"]
    assert report.as_dict()["generated"] == {
        "repositories": {"day": 2, "week": 2, "month": 2},
        "overall": {"day": 2, "week": 1, "month": 1},
    }
    assert len(repo_rows) == 6
    assert (tmp_path / "acme_web" / "summaries" / "day" / "2024-01-02.md").is_file()


def test_second_run_skips_exported_intervals(database, seed_activity, fake_summarizer, tmp_path):
    settings = Settings(ai_summary_enabled=True, output_dir=str(tmp_path))

    async def scenario():
        async with database() as session_maker:
            async with session_maker() as session:
                await seed_activity(session, "acme/api", date(2024, 1, 1))

            pipeline = SummaryPipeline(settings, session_maker=session_maker, summarizer=fake_summarizer)
            first = await pipeline.run_once(date_range=JANUARY)
            second = await pipeline.run_once(date_range=JANUARY)
            forced = await pipeline.run_once(date_range=JANUARY, overwrite=True)
            return first, second, forced

    first, second, forced = asyncio.run(scenario())

    assert len(first.generated) == 6
    assert second.generated == []
    assert len(forced.generated) == 6


def test_disabled_granularities_are_not_generated(database, seed_activity, fake_summarizer):
    settings = Settings(
        ai_summary_enabled=True,
        summary_week_enabled=False,
        summary_month_enabled=False,
        tracked_repositories=["acme/api"],
    )

    async def scenario():
        async with database() as session_maker:
            async with session_maker() as session:
                await seed_activity(session, "acme/api", date(2024, 1, 1))
                await seed_activity(session, "acme/web", date(2024, 1, 1))

            pipeline = SummaryPipeline(settings, session_maker=session_maker, summarizer=fake_summarizer)
            return await pipeline.run_once(date_range=JANUARY)

    report = asyncio.run(scenario())

    assert report.repositories == ["acme/api"]
    assert {o.interval.interval_type for o in report.generated} == {"day"}
    assert report.count("acme/api") == 1
    assert report.count(OVERALL_TARGET) == 1


class CommitCountSummarizer:
    async def generate_repo_summary(self, metrics, config, date_range, interval_type):
        return f"{metrics.stats.commits} commits" if metrics.has_activity else None

    async def generate_overall_summary(self, metrics, config, date_range, interval_type):
        return f"{metrics.stats.commits} commits" if metrics.has_activity else None


def test_default_range_waits_for_day_to_finish(database, seed_activity, tmp_path):
    settings = Settings(
        ai_summary_enabled=True,
        output_dir=str(tmp_path),
        summary_week_enabled=False,
        summary_month_enabled=False,
    )

    async def scenario():
        async with database() as session_maker:
            async with session_maker() as session:
                await seed_activity(session, "acme/api", date(2024, 3, 5), prs=0, issues=0)

            pipeline = SummaryPipeline(settings, session_maker=session_maker, summarizer=CommitCountSummarizer())
            # 03-05 当天运行：这一天还没结束
            first = await pipeline.run_once(date_range=default_date_range(7, today=date(2024, 3, 5)))

            async with session_maker() as session:
                for i in range(10):
                    session.add(Commit(
                        oid=f"late-{i}",
                        repository="acme/api",
                        author="alice",
                        message=f"late commit {i}",
                        committed_date=datetime(2024, 3, 5, 23, 0),
                    ))
                await session.commit()

            second = await pipeline.run_once(date_range=default_date_range(7, today=date(2024, 3, 6)))

            async with session_maker() as session:
                rows = (await session.execute(select(RepoSummary))).scalars().all()
            return first, second, rows

    first, second, rows = asyncio.run(scenario())

    assert first.generated == []
    assert [o.date for o in second.generated if o.target == "acme/api"] == ["2024-03-05"]
    assert [(r.date, r.summary) for r in rows] == [("2024-03-05", "11 commits")]
    assert (tmp_path / "acme_api" / "summaries" / "day" / "2024-03-05.md").read_text(encoding="utf-8") == "11 commits"
