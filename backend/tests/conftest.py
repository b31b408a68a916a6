"""测试共用 fixture

Provides:
    database        -- 返回异步上下文管理器，创建内存 SQLite 并建表
    seed_activity   -- 写入一个仓库及其当天的 PR / Issue / Commit
    fake_summarizer -- 不调用 AI 的摘要器，记录调用参数
"""

from contextlib import asynccontextmanager
from datetime import date, datetime, time

import pytest
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from contributor_analytics.core.db import Base, import_models
from contributor_analytics.models.activity import Commit, Issue, PullRequest, Repository

import_models()


@asynccontextmanager
async def _memory_database():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    try:
        yield async_sessionmaker(engine, expire_on_commit=False)
    finally:
        await engine.dispose()


@pytest.fixture
def database():
    return _memory_database


async def _seed_activity(
    session,
    repo_id: str,
    day: date,
    *,
    prs: int = 1,
    issues: int = 1,
    commits: int = 1,
    author: str = "alice",
) -> None:
    owner, name = repo_id.split("/") if "/" in repo_id else ("local", repo_id)
    if await session.get(Repository, repo_id) is None:
        session.add(Repository(id=repo_id, owner=owner, name=name))

    noon = datetime.combine(day, time(12, 0))
    base = day.toordinal() * 100
    for i in range(prs):
        session.add(PullRequest(
            number=base + i,
            repository=repo_id,
            author=author,
            title=f"Improve docs part {i}",
            created_at=noon,
            merged=True,
            merged_at=noon,
            additions=10,
            deletions=2,
        ))
    for i in range(issues):
        session.add(Issue(
            number=base + 50 + i,
            repository=repo_id,
            author="bob",
            title=f"Crash on startup {i}",
            created_at=noon,
        ))
    for i in range(commits):
        session.add(Commit(
            oid=f"{repo_id}-{day.isoformat()}-{i}",
            repository=repo_id,
            author=author,
            message=f"commit {i}",
            committed_date=noon,
            additions=5,
            deletions=1,
        ))
    await session.commit()


@pytest.fixture
def seed_activity():
    return _seed_activity


class FakeSummarizer:
    """有活动时返回固定文本；start_date 在 fail_on 中时抛出异常"""

    def __init__(self, summary: str | None = "Great progress", fail_on=()) -> None:
        self.summary = summary
        self.fail_on = set(fail_on)
        self.repo_calls = []
        self.overall_calls = []

    async def generate_repo_summary(self, metrics, config, date_range, interval_type):
        self.repo_calls.append((metrics.repository, date_range.start_date, interval_type))
        if date_range.start_date in self.fail_on:
            raise RuntimeError("AI request timed out")
        return self.summary if metrics.has_activity else None

    async def generate_overall_summary(self, metrics, config, date_range, interval_type):
        self.overall_calls.append((date_range.start_date, interval_type))
        if date_range.start_date in self.fail_on:
            raise RuntimeError("AI request timed out")
        return self.summary if metrics.has_activity else None


@pytest.fixture
def fake_summarizer():
    return FakeSummarizer()


@pytest.fixture
def summarizer_factory():
    return FakeSummarizer
