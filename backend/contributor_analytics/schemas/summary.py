from datetime import datetime
from typing import List, Literal

from pydantic import BaseModel, ConfigDict


class RepoSummaryItem(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    repo_id: str
    date: str
    interval_type: Literal["day", "week", "month"]
    summary: str | None = None
    created_at: datetime
    updated_at: datetime


class RepoSummaryListResponse(BaseModel):
    items: List[RepoSummaryItem]


class OverallSummaryItem(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    date: str
    interval_type: Literal["day", "week", "month"]
    summary: str | None = None
    created_at: datetime
    updated_at: datetime


class GeneratedCounts(BaseModel):
    day: int = 0
    week: int = 0
    month: int = 0


class GeneratedSummary(BaseModel):
    repositories: GeneratedCounts
    overall: GeneratedCounts


class SummaryRunResponse(BaseModel):
    start_date: str
    end_date: str
    repositories: List[str]
    generated: GeneratedSummary
