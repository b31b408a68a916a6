"""时间区间工具

区间均为左闭右开 [start, end)，按粒度对齐：
- day: 每天 00:00
- week: 周一（ISO 周）
- month: 每月 1 日
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone
from typing import Iterator, Literal

IntervalType = Literal["day", "week", "month"]

INTERVAL_TYPES: tuple[IntervalType, ...] = ("day", "week", "month")


class InvalidDateRangeError(ValueError):
    """日期范围或粒度不合法"""


@dataclass(frozen=True)
class TimeInterval:
    interval_type: IntervalType
    interval_start: date
    interval_end: date

    @property
    def date_range(self) -> "DateRange":
        return DateRange(
            start_date=to_date_string(self.interval_start),
            end_date=to_date_string(self.interval_end),
        )


@dataclass(frozen=True)
class DateRange:
    """查询用日期范围，字符串格式 YYYY-MM-DD，end_date 不包含在内"""

    start_date: str
    end_date: str


def to_date_string(value: date | datetime) -> str:
    if isinstance(value, datetime):
        value = value.date()
    return value.isoformat()


def parse_date(value: str) -> date:
    try:
        return date.fromisoformat(value)
    except ValueError as e:
        raise InvalidDateRangeError(f"无效日期: {value!r}") from e


def utc_today() -> date:
    return datetime.now(timezone.utc).date()


def default_date_range(days_back: int, today: date | None = None) -> DateRange:
    """最近 days_back 个已结束的自然日，不含今天"""
    if days_back < 1:
        raise InvalidDateRangeError(f"days_back 必须大于 0: {days_back}")
    end = today or utc_today()
    start = end - timedelta(days=days_back)
    return DateRange(start_date=to_date_string(start), end_date=to_date_string(end))


def validate_date_range(date_range: DateRange) -> tuple[date, date]:
    """解析并校验 [start, end)，返回两个日期"""
    start = parse_date(date_range.start_date)
    end = parse_date(date_range.end_date)
    if start >= end:
        raise InvalidDateRangeError(
            f"开始日期必须早于结束日期: {date_range.start_date} >= {date_range.end_date}"
        )
    return start, end


def floor_to_interval(value: date, interval_type: IntervalType) -> date:
    if interval_type == "day":
        return value
    if interval_type == "week":
        return value - timedelta(days=value.weekday())
    if interval_type == "month":
        return value.replace(day=1)
    raise InvalidDateRangeError(f"未知的时间粒度: {interval_type!r}")


def next_interval_start(value: date, interval_type: IntervalType) -> date:
    if interval_type == "day":
        return value + timedelta(days=1)
    if interval_type == "week":
        return value + timedelta(days=7)
    if interval_type == "month":
        if value.month == 12:
            return value.replace(year=value.year + 1, month=1, day=1)
        return value.replace(month=value.month + 1, day=1)
    raise InvalidDateRangeError(f"未知的时间粒度: {interval_type!r}")


def iter_intervals(interval_type: IntervalType, date_range: DateRange) -> Iterator[TimeInterval]:
    """生成与 date_range 有交集且在 end_date 前已结束的对齐区间，按时间升序

    未结束的区间（interval_end > end_date）不生成，避免把进行中的周期写成定稿。
    """
    start, end = validate_date_range(date_range)

    cursor = floor_to_interval(start, interval_type)
    while True:
        following = next_interval_start(cursor, interval_type)
        if following > end:
            break
        yield TimeInterval(interval_type=interval_type, interval_start=cursor, interval_end=following)
        cursor = following
