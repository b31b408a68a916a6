"""摘要模型"""

from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, Integer, String, Text, UniqueConstraint

from contributor_analytics.core.db import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class RepoSummary(Base):
    """仓库摘要表，每个 (仓库, 日期, 粒度) 只保留一条"""

    __tablename__ = "repo_summaries"
    __table_args__ = (
        UniqueConstraint("repo_id", "date", "interval_type", name="uq_repo_summary"),
    )

    id = Column(Integer, primary_key=True, index=True)
    repo_id = Column(String(255), nullable=False, index=True)  # owner/name
    date = Column(String(10), nullable=False, index=True)  # 区间起始日期 YYYY-MM-DD
    interval_type = Column(String(10), nullable=False)  # "day", "week", "month"
    summary = Column(Text, nullable=True)

    created_at = Column(DateTime, default=_utcnow, nullable=False)
    updated_at = Column(DateTime, default=_utcnow, onupdate=_utcnow, nullable=False)


class OverallSummary(Base):
    """全局摘要表（不区分仓库），RSS 从这里读取"""

    __tablename__ = "overall_summaries"
    __table_args__ = (
        UniqueConstraint("date", "interval_type", name="uq_overall_summary"),
    )

    id = Column(Integer, primary_key=True, index=True)
    date = Column(String(10), nullable=False, index=True)
    interval_type = Column(String(10), nullable=False, index=True)
    summary = Column(Text, nullable=True)

    created_at = Column(DateTime, default=_utcnow, nullable=False)
    updated_at = Column(DateTime, default=_utcnow, onupdate=_utcnow, nullable=False)
