"""仓库活动指标查询

按日期范围 [start_date, end_date) 统计 PR、Issue、Commit 和活跃贡献者。
"""

from __future__ import annotations

import logging
from collections import Counter, defaultdict
from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import datetime

from sqlalchemy import and_, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from contributor_analytics.models.activity import Commit, Issue, PullRequest
from contributor_analytics.services.intervals import DateRange, parse_date

logger = logging.getLogger(__name__)

TOP_ITEMS_LIMIT = 10
TOP_CONTRIBUTORS_LIMIT = 5


@dataclass
class WorkItem:
    number: int
    title: str
    author: str
    repository: str


@dataclass
class ContributorActivity:
    username: str
    pull_requests: int = 0
    issues: int = 0
    commits: int = 0

    @property
    def total(self) -> int:
        return self.pull_requests + self.issues + self.commits


@dataclass
class ActivityStats:
    pull_requests_opened: int = 0
    pull_requests_merged: int = 0
    issues_opened: int = 0
    issues_closed: int = 0
    commits: int = 0
    additions: int = 0
    deletions: int = 0
    merged_pull_requests: list[WorkItem] = field(default_factory=list)
    opened_issues: list[WorkItem] = field(default_factory=list)
    top_contributors: list[ContributorActivity] = field(default_factory=list)
    active_contributors: int = 0

    @property
    def has_activity(self) -> bool:
        return bool(
            self.pull_requests_opened
            or self.pull_requests_merged
            or self.issues_opened
            or self.issues_closed
            or self.commits
        )


@dataclass
class RepoMetrics:
    repository: str
    date_range: DateRange
    stats: ActivityStats

    @property
    def has_activity(self) -> bool:
        return self.stats.has_activity


@dataclass
class OverallMetrics:
    date_range: DateRange
    stats: ActivityStats
    repositories: list[RepoMetrics] = field(default_factory=list)

    @property
    def has_activity(self) -> bool:
        return self.stats.has_activity


@dataclass
class _ActivityRows:
    opened_prs: Sequence[PullRequest]
    merged_prs: Sequence[PullRequest]
    opened_issues: Sequence[Issue]
    closed_issues: Sequence[Issue]
    commits: Sequence[Commit]


def _bounds(date_range: DateRange) -> tuple[datetime, datetime]:
    # SQLite 存储 naive datetime，这里同样使用 naive UTC
    start = parse_date(date_range.start_date)
    end = parse_date(date_range.end_date)
    return (
        datetime(start.year, start.month, start.day),
        datetime(end.year, end.month, end.day),
    )


async def _fetch_rows(
    session: AsyncSession,
    date_range: DateRange,
    repository: str | None = None,
) -> _ActivityRows:
    start, end = _bounds(date_range)

    def in_range(column):
        return and_(column >= start, column < end)

    pr_query = select(PullRequest).where(
        or_(in_range(PullRequest.created_at), in_range(PullRequest.merged_at))
    )
    issue_query = select(Issue).where(
        or_(in_range(Issue.created_at), in_range(Issue.closed_at))
    )
    commit_query = select(Commit).where(in_range(Commit.committed_date))

    if repository is not None:
        pr_query = pr_query.where(PullRequest.repository == repository)
        issue_query = issue_query.where(Issue.repository == repository)
        commit_query = commit_query.where(Commit.repository == repository)

    prs = (await session.execute(pr_query.order_by(PullRequest.created_at))).scalars().all()
    issues = (await session.execute(issue_query.order_by(Issue.created_at))).scalars().all()
    commits = (await session.execute(commit_query.order_by(Commit.committed_date))).scalars().all()

    return _ActivityRows(
        opened_prs=[pr for pr in prs if start <= pr.created_at < end],
        merged_prs=[
            pr for pr in prs
            if pr.merged and pr.merged_at is not None and start <= pr.merged_at < end
        ],
        opened_issues=[issue for issue in issues if start <= issue.created_at < end],
        closed_issues=[
            issue for issue in issues
            if issue.closed_at is not None and start <= issue.closed_at < end
        ],
        commits=commits,
    )


def _build_stats(rows: _ActivityRows) -> ActivityStats:
    contributors: dict[str, ContributorActivity] = {}

    def contributor(username: str) -> ContributorActivity:
        if username not in contributors:
            contributors[username] = ContributorActivity(username=username)
        return contributors[username]

    for pr in rows.opened_prs:
        contributor(pr.author).pull_requests += 1
    for issue in rows.opened_issues:
        contributor(issue.author).issues += 1
    for commit in rows.commits:
        if commit.author:
            contributor(commit.author).commits += 1

    ranked = sorted(contributors.values(), key=lambda c: (-c.total, c.username))

    return ActivityStats(
        pull_requests_opened=len(rows.opened_prs),
        pull_requests_merged=len(rows.merged_prs),
        issues_opened=len(rows.opened_issues),
        issues_closed=len(rows.closed_issues),
        commits=len(rows.commits),
        additions=sum(c.additions for c in rows.commits),
        deletions=sum(c.deletions for c in rows.commits),
        merged_pull_requests=[
            WorkItem(number=pr.number, title=pr.title, author=pr.author, repository=pr.repository)
            for pr in rows.merged_prs[:TOP_ITEMS_LIMIT]
        ],
        opened_issues=[
            WorkItem(number=i.number, title=i.title, author=i.author, repository=i.repository)
            for i in rows.opened_issues[:TOP_ITEMS_LIMIT]
        ],
        top_contributors=ranked[:TOP_CONTRIBUTORS_LIMIT],
        active_contributors=len(ranked),
    )


async def get_repo_metrics(
    session: AsyncSession,
    *,
    repository: str,
    date_range: DateRange,
) -> RepoMetrics:
    rows = await _fetch_rows(session, date_range, repository=repository)
    metrics = RepoMetrics(repository=repository, date_range=date_range, stats=_build_stats(rows))
    logger.debug(
        f"{repository} {date_range.start_date}~{date_range.end_date}: "
        f"PR {metrics.stats.pull_requests_opened}/{metrics.stats.pull_requests_merged}, "
        f"Issue {metrics.stats.issues_opened}/{metrics.stats.issues_closed}, "
        f"Commit {metrics.stats.commits}"
    )
    return metrics


async def get_overall_metrics(
    session: AsyncSession,
    *,
    date_range: DateRange,
) -> OverallMetrics:
    """全部仓库的汇总指标，附带每个有活动的仓库的明细（按活动量倒序）"""
    rows = await _fetch_rows(session, date_range)

    grouped: dict[str, dict[str, list]] = defaultdict(lambda: defaultdict(list))
    for name in ("opened_prs", "merged_prs", "opened_issues", "closed_issues", "commits"):
        for row in getattr(rows, name):
            grouped[row.repository][name].append(row)

    repositories = [
        RepoMetrics(
            repository=repository,
            date_range=date_range,
            stats=_build_stats(_ActivityRows(
                opened_prs=parts["opened_prs"],
                merged_prs=parts["merged_prs"],
                opened_issues=parts["opened_issues"],
                closed_issues=parts["closed_issues"],
                commits=parts["commits"],
            )),
        )
        for repository, parts in grouped.items()
    ]

    activity = Counter({
        m.repository: m.stats.pull_requests_opened + m.stats.issues_opened + m.stats.commits
        for m in repositories
    })
    repositories.sort(key=lambda m: (-activity[m.repository], m.repository))

    return OverallMetrics(date_range=date_range, stats=_build_stats(rows), repositories=repositories)
