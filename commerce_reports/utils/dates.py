"""封装报表时间范围计算的常用辅助函数。"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Literal, Optional

RangeToken = Literal["last_7_days", "last_30_days", "mtd", "qtd", "ytd", "custom"]
RANGE_TOKENS = ("last_7_days", "last_30_days", "mtd", "qtd", "ytd", "custom")

ISO_FMT = "%Y-%m-%dT%H:%M:%SZ"


@dataclass(frozen=True)
class ResolvedRange:
    """
    解析后的绝对时间范围。

    属性:
        after (str): 起始时刻，ISO-8601 UTC 字符串。
        before (str): 结束时刻，ISO-8601 UTC 字符串。
    """

    after: str
    before: str


def to_iso(moment: datetime) -> str:
    """将时刻格式化为 `YYYY-MM-DDTHH:MM:SSZ`，naive 时间视为 UTC。"""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc).strftime(ISO_FMT)


def start_of_utc_month(moment: datetime) -> datetime:
    return datetime(moment.year, moment.month, 1, tzinfo=timezone.utc)


def start_of_utc_quarter(moment: datetime) -> datetime:
    quarter_month = (moment.month - 1) // 3 * 3 + 1
    return datetime(moment.year, quarter_month, 1, tzinfo=timezone.utc)


def start_of_utc_year(moment: datetime) -> datetime:
    return datetime(moment.year, 1, 1, tzinfo=timezone.utc)


def recent_period(days: int, now: datetime) -> tuple[datetime, datetime]:
    """
    功能说明:
        返回截至 now 的最近 days 天（按 24 小时计）起止时刻。
    参数:
        days (int): 回溯天数。
        now (datetime): 当前 UTC 时刻。
    返回:
        tuple[datetime, datetime]: (after, before) 时刻元组。
    """
    return now - timedelta(days=days), now


def resolve_range(
    token: Optional[str] = None,
    after: Optional[str] = None,
    before: Optional[str] = None,
    *,
    now: Optional[datetime] = None,
) -> ResolvedRange:
    """
    功能说明:
        将符号化的时间范围解析为绝对起止时刻。`custom` 且同时提供 after/before 时
        原样返回（不校验先后顺序）；未知或缺省的标记按 `last_7_days` 处理。
    参数:
        token (Optional[str]): 时间范围标记，取值见 RANGE_TOKENS。
        after (Optional[str]): custom 模式下的起始时刻。
        before (Optional[str]): custom 模式下的结束时刻。
        now (Optional[datetime]): 当前时刻，缺省读取系统 UTC 时间。
    返回:
        ResolvedRange: 解析后的起止时刻。
    """
    if token == "custom" and after and before:
        return ResolvedRange(after=after, before=before)

    current = now or datetime.now(timezone.utc)
    if current.tzinfo is None:
        current = current.replace(tzinfo=timezone.utc)
    current = current.astimezone(timezone.utc)

    if token == "last_30_days":
        start, end = recent_period(30, current)
    elif token == "mtd":
        start, end = start_of_utc_month(current), current
    elif token == "qtd":
        start, end = start_of_utc_quarter(current), current
    elif token == "ytd":
        start, end = start_of_utc_year(current), current
    else:
        start, end = recent_period(7, current)
    return ResolvedRange(after=to_iso(start), before=to_iso(end))
