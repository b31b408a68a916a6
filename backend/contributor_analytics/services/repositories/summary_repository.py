from collections.abc import Sequence

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from contributor_analytics.models.summary import OverallSummary, RepoSummary


class SummaryRepository:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def store_repo_summary(
        self,
        repo_id: str,
        date: str,
        summary: str,
        interval_type: str,
    ) -> RepoSummary:
        """写入仓库摘要，已存在相同 (repo_id, date, interval_type) 时覆盖内容"""
        record = await self.get_repo_summary(repo_id, date, interval_type)
        if record is None:
            record = RepoSummary(
                repo_id=repo_id,
                date=date,
                interval_type=interval_type,
                summary=summary,
            )
            self._session.add(record)
        else:
            record.summary = summary

        await self._session.commit()
        await self._session.refresh(record)
        return record

    async def store_overall_summary(
        self,
        date: str,
        summary: str,
        interval_type: str,
    ) -> OverallSummary:
        record = await self.get_overall_summary(date, interval_type)
        if record is None:
            record = OverallSummary(date=date, interval_type=interval_type, summary=summary)
            self._session.add(record)
        else:
            record.summary = summary

        await self._session.commit()
        await self._session.refresh(record)
        return record

    async def get_repo_summary(
        self, repo_id: str, date: str, interval_type: str
    ) -> RepoSummary | None:
        result = await self._session.execute(
            select(RepoSummary)
            .where(RepoSummary.repo_id == repo_id)
            .where(RepoSummary.date == date)
            .where(RepoSummary.interval_type == interval_type)
        )
        return result.scalar_one_or_none()

    async def get_overall_summary(self, date: str, interval_type: str) -> OverallSummary | None:
        result = await self._session.execute(
            select(OverallSummary)
            .where(OverallSummary.date == date)
            .where(OverallSummary.interval_type == interval_type)
        )
        return result.scalar_one_or_none()

    async def list_recent_repo_summaries(
        self,
        repo_id: str,
        *,
        interval_type: str | None = None,
        limit: int = 20,
    ) -> Sequence[RepoSummary]:
        query = select(RepoSummary).where(RepoSummary.repo_id == repo_id)
        if interval_type:
            query = query.where(RepoSummary.interval_type == interval_type)
        result = await self._session.execute(
            query.order_by(RepoSummary.date.desc()).limit(limit)
        )
        return result.scalars().all()

    async def list_recent_overall(self, interval_type: str, *, limit: int) -> Sequence[OverallSummary]:
        """按日期倒序返回最近的全局摘要"""
        result = await self._session.execute(
            select(OverallSummary)
            .where(OverallSummary.interval_type == interval_type)
            .order_by(OverallSummary.date.desc())
            .limit(limit)
        )
        return result.scalars().all()
