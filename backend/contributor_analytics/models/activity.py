"""仓库活动模型

这些表由独立的采集流程写入，本服务只读取。
"""

from datetime import datetime, timezone

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, String, Text, UniqueConstraint

from contributor_analytics.core.db import Base


class Repository(Base):
    __tablename__ = "repositories"

    id = Column(String(255), primary_key=True)  # owner/name
    owner = Column(String(255), nullable=False)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    stars = Column(Integer, default=0, nullable=False)
    last_updated = Column(DateTime, default=lambda: datetime.now(timezone.utc), nullable=False)


class PullRequest(Base):
    __tablename__ = "pull_requests"
    __table_args__ = (UniqueConstraint("repository", "number", name="uq_repo_pr_number"),)

    id = Column(Integer, primary_key=True, index=True)
    number = Column(Integer, nullable=False)
    repository = Column(String(255), ForeignKey("repositories.id"), nullable=False, index=True)
    author = Column(String(255), nullable=False, index=True)
    title = Column(Text, nullable=False)
    created_at = Column(DateTime, nullable=False, index=True)
    merged = Column(Boolean, default=False, nullable=False)
    merged_at = Column(DateTime, nullable=True, index=True)
    closed_at = Column(DateTime, nullable=True)
    additions = Column(Integer, default=0, nullable=False)
    deletions = Column(Integer, default=0, nullable=False)


class Issue(Base):
    __tablename__ = "issues"
    __table_args__ = (UniqueConstraint("repository", "number", name="uq_repo_issue_number"),)

    id = Column(Integer, primary_key=True, index=True)
    number = Column(Integer, nullable=False)
    repository = Column(String(255), ForeignKey("repositories.id"), nullable=False, index=True)
    author = Column(String(255), nullable=False, index=True)
    title = Column(Text, nullable=False)
    created_at = Column(DateTime, nullable=False, index=True)
    closed_at = Column(DateTime, nullable=True, index=True)
    comment_count = Column(Integer, default=0, nullable=False)


class Commit(Base):
    __tablename__ = "commits"

    oid = Column(String(64), primary_key=True)
    repository = Column(String(255), ForeignKey("repositories.id"), nullable=False, index=True)
    author = Column(String(255), nullable=True, index=True)
    message = Column(Text, nullable=False)
    committed_date = Column(DateTime, nullable=False, index=True)
    additions = Column(Integer, default=0, nullable=False)
    deletions = Column(Integer, default=0, nullable=False)
