"""根据活动指标构造提示词并调用 AI 生成摘要"""

from __future__ import annotations

import logging

from contributor_analytics.services.intervals import DateRange, IntervalType
from contributor_analytics.services.metrics import ActivityStats, OverallMetrics, RepoMetrics
from contributor_analytics.services.summary_client import AISummaryConfig, SummaryClient, summary_client

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "You are an analyst writing concise, factual activity reports for an open source "
    "project. Use markdown. Only mention facts present in the data."
)

INTERVAL_LABELS: dict[IntervalType, str] = {
    "day": "daily",
    "week": "weekly",
    "month": "monthly",
}

# 不同粒度的篇幅要求和 token 上限
INTERVAL_INSTRUCTIONS: dict[IntervalType, tuple[str, int]] = {
    "day": ("Write 2-3 short paragraphs focused on what changed today.", 600),
    "week": ("Write a summary with a short overview followed by 3-5 bullet point highlights.", 800),
    "month": (
        "Write a comprehensive report: an overview, the main themes of work, "
        "notable contributors, and open areas that need attention.",
        1500,
    ),
}


def format_stats(stats: ActivityStats) -> str:
    lines = [
        f"- Pull requests: {stats.pull_requests_opened} opened, {stats.pull_requests_merged} merged",
        f"- Issues: {stats.issues_opened} opened, {stats.issues_closed} closed",
        f"- Commits: {stats.commits} (+{stats.additions}/-{stats.deletions} lines)",
        f"- Active contributors: {stats.active_contributors}",
    ]
    if stats.top_contributors:
        lines.append("- Top contributors:")
        lines.extend(
            f"  - {c.username}: {c.pull_requests} PRs, {c.issues} issues, {c.commits} commits"
            for c in stats.top_contributors
        )
    if stats.merged_pull_requests:
        lines.append("- Merged pull requests:")
        lines.extend(
            f"  - #{pr.number} {pr.title} (by {pr.author})" for pr in stats.merged_pull_requests
        )
    if stats.opened_issues:
        lines.append("- New issues:")
        lines.extend(
            f"  - #{issue.number} {issue.title} (by {issue.author})" for issue in stats.opened_issues
        )
    return "\n".join(lines)


def build_repo_prompt(
    metrics: RepoMetrics,
    config: AISummaryConfig,
    date_range: DateRange,
    interval_type: IntervalType,
) -> str:
    instructions, _ = INTERVAL_INSTRUCTIONS[interval_type]
    return (
        f"Project context: {config.project_context}\n\n"
        f"Write a {INTERVAL_LABELS[interval_type]} activity summary for the repository "
        f"{metrics.repository} covering {date_range.start_date} up to (not including) "
        f"{date_range.end_date}.\n{instructions}\n\n"
        f"Activity data:\n{format_stats(metrics.stats)}"
    )


def build_overall_prompt(
    metrics: OverallMetrics,
    config: AISummaryConfig,
    date_range: DateRange,
    interval_type: IntervalType,
) -> str:
    instructions, _ = INTERVAL_INSTRUCTIONS[interval_type]
    sections = [
        f"Project context: {config.project_context}\n",
        f"Write a {INTERVAL_LABELS[interval_type]} activity summary across all tracked "
        f"repositories covering {date_range.start_date} up to (not including) "
        f"{date_range.end_date}.\n{instructions}\n",
        f"Totals:\n{format_stats(metrics.stats)}",
    ]
    for repo in metrics.repositories:
        sections.append(f"\nRepository {repo.repository}:\n{format_stats(repo.stats)}")
    return "\n".join(sections)


class RepoSummarizer:
    """没有活动时返回 None，不调用 AI"""

    def __init__(self, client: SummaryClient | None = None) -> None:
        self._client = client or summary_client

    async def generate_repo_summary(
        self,
        metrics: RepoMetrics,
        config: AISummaryConfig,
        date_range: DateRange,
        interval_type: IntervalType,
    ) -> str | None:
        if not metrics.has_activity:
            return None

        _, max_tokens = INTERVAL_INSTRUCTIONS[interval_type]
        prompt = build_repo_prompt(metrics, config, date_range, interval_type)
        logger.debug(f"生成 {metrics.repository} 的 {interval_type} 摘要，提示词长度 {len(prompt)}")
        summary = await self._client.complete(
            prompt, config, system_prompt=SYSTEM_PROMPT, max_tokens=max_tokens
        )
        return summary or None

    async def generate_overall_summary(
        self,
        metrics: OverallMetrics,
        config: AISummaryConfig,
        date_range: DateRange,
        interval_type: IntervalType,
    ) -> str | None:
        if not metrics.has_activity:
            return None

        _, max_tokens = INTERVAL_INSTRUCTIONS[interval_type]
        prompt = build_overall_prompt(metrics, config, date_range, interval_type)
        summary = await self._client.complete(
            prompt, config, system_prompt=SYSTEM_PROMPT, max_tokens=max_tokens
        )
        return summary or None
