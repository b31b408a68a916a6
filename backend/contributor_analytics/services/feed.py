"""RSS 2.0 输出"""

from __future__ import annotations

import logging
import re
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime, timezone
from email.utils import format_datetime

from sqlalchemy.ext.asyncio import AsyncSession

from contributor_analytics.models.summary import OverallSummary
from contributor_analytics.services.intervals import InvalidDateRangeError, IntervalType, parse_date
from contributor_analytics.services.repositories.summary_repository import SummaryRepository

FEED_TITLE = "Contributor Analytics"
FEED_DESCRIPTION = "Daily contributor activity summaries and analytics"
DESCRIPTION_LIMIT = 500

logger = logging.getLogger(__name__)

# 每种粒度在 RSS 中保留的条数，输出顺序为月、周、日
FEED_SECTIONS: tuple[tuple[IntervalType, str, int], ...] = (
    ("month", "Monthly Summary", 1),
    ("week", "Weekly Summary", 4),
    ("day", "Daily Summary", 30),
)

_MARKDOWN_RULES = (
    (re.compile(r"#{1,6}\s"), ""),  # 标题
    (re.compile(r"\*\*([^*]+)\*\*"), r"\1"),  # 粗体
    (re.compile(r"\*([^*]+)\*"), r"\1"),  # 斜体
    (re.compile(r"`([^`]+)`"), r"\1"),  # 行内代码
    (re.compile(r"\[([^\]]+)\]\([^)]+\)"), r"\1"),  # 链接
    (re.compile(r"^[-*+]\s", re.MULTILINE), "• "),  # 列表
)


def escape_xml(text: str) -> str:
    return (
        text.replace("&", "&amp;")
        .replace("<", "&lt;")
        .replace(">", "&gt;")
        .replace('"', "&quot;")
        .replace("'", "&apos;")
    )


def strip_markdown(text: str) -> str:
    for pattern, replacement in _MARKDOWN_RULES:
        text = pattern.sub(replacement, text)
    return text.strip()


def truncate_description(text: str, limit: int = DESCRIPTION_LIMIT) -> str:
    if len(text) > limit:
        return text[:limit] + "..."
    return text


def rfc822_date(value: str) -> str:
    """YYYY-MM-DD 转 RFC 822，无法解析时原样返回"""
    try:
        day = parse_date(value)
    except InvalidDateRangeError:
        logger.warning(f"摘要日期无法解析，按原样输出: {value!r}")
        return value
    return format_datetime(datetime(day.year, day.month, day.day, tzinfo=timezone.utc), usegmt=True)


@dataclass(frozen=True)
class FeedItem:
    title: str
    link: str
    pub_date: str
    description: str

    def to_xml(self) -> str:
        link = escape_xml(self.link)
        return (
            "\n    <item>"
            f"\n      <title>{escape_xml(self.title)}</title>"
            f"\n      <link>{link}</link>"
            f'\n      <guid isPermaLink="true">{link}</guid>'
            f"\n      <pubDate>{self.pub_date}</pubDate>"
            f"\n      <description>{escape_xml(self.description)}</description>"
            "\n    </item>"
        )


def build_feed_item(
    summary: OverallSummary,
    interval_type: IntervalType,
    label: str,
    site_url: str,
) -> FeedItem:
    if summary.summary:
        description = truncate_description(strip_markdown(summary.summary))
    else:
        description = f"{label} contributor activity summary"

    return FeedItem(
        title=f"{label}: {summary.date}",
        link=f"{site_url}/summary/{interval_type}/{summary.date}",
        pub_date=rfc822_date(summary.date),
        description=description,
    )


def render_rss(items: Sequence[FeedItem], site_url: str, build_date: datetime | None = None) -> str:
    build_date = build_date or datetime.now(timezone.utc)
    site = escape_xml(site_url)
    body = "".join(item.to_xml() for item in items)
    return f"""<?xml version="1.0" encoding="UTF-8"?>
<rss version="2.0" xmlns:atom="http://www.w3.org/2005/Atom">
  <channel>
    <title>{escape_xml(FEED_TITLE)}</title>
    <link>{site}</link>
    <description>{escape_xml(FEED_DESCRIPTION)}</description>
    <language>en-us</language>
    <lastBuildDate>{format_datetime(build_date, usegmt=True)}</lastBuildDate>
    <atom:link href="{site}/rss.xml" rel="self" type="application/rss+xml"/>{body}
  </channel>
</rss>"""


async def build_feed(session: AsyncSession, site_url: str) -> str:
    """读取最近的全局摘要并生成 RSS 文档"""
    repo = SummaryRepository(session)
    site_url = site_url.rstrip("/")

    items: list[FeedItem] = []
    for interval_type, label, limit in FEED_SECTIONS:
        summaries = await repo.list_recent_overall(interval_type, limit=limit)
        items.extend(build_feed_item(s, interval_type, label, site_url) for s in summaries)

    return render_rss(items, site_url)
