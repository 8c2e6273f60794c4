"""Display formatting for numbers, dates and elapsed time."""

from __future__ import annotations

import math
from datetime import UTC, datetime
from typing import Union

from dateutil import parser as date_parser

MONTH_ABBREVIATIONS = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")

_MINUTE = 60
_HOUR = 60 * _MINUTE
_DAY = 24 * _HOUR


def format_magnitude(value: int) -> str:
    """Render counts as ``999``, ``1.5k`` or ``2.5M``."""

    if value >= 1_000_000:
        return f"{_round_half_up(value / 1_000_000, 1):.1f}M"
    if value >= 1_000:
        return f"{_round_half_up(value / 1_000, 1):.1f}k"
    return str(value)


def format_relative_time(elapsed_seconds: float) -> str:
    """Describe an elapsed duration as "just now", "3 hours ago", "2 years ago"."""

    seconds = math.floor(elapsed_seconds)
    if seconds < _MINUTE:
        return "just now"

    minutes = seconds // _MINUTE
    if minutes < 60:
        return _ago(minutes, "minute")

    hours = minutes // 60
    if hours < 24:
        return _ago(hours, "hour")

    days = hours // 24
    if days < 30:
        return _ago(days, "day")

    months = days // 30
    if months < 12:
        return _ago(months, "month")

    return _ago(months // 12, "year")


def relative_time_since(timestamp: Union[str, datetime], now: datetime) -> str:
    moment = parse_timestamp(timestamp)
    return format_relative_time((now - moment).total_seconds())


def format_long_date(timestamp: Union[str, datetime]) -> str:
    """``2020-01-05T10:00:00Z`` -> ``January 5, 2020``."""

    moment = parse_timestamp(timestamp)
    return f"{moment:%B} {moment.day}, {moment.year}"


def format_short_date(moment: datetime) -> str:
    """US numeric date without zero padding, e.g. ``10/8/2026``."""

    return f"{moment.month}/{moment.day}/{moment.year}"


def month_label(unix_seconds: int) -> str:
    return MONTH_ABBREVIATIONS[datetime.fromtimestamp(unix_seconds, tz=UTC).month - 1]


def parse_timestamp(timestamp: Union[str, datetime]) -> datetime:
    moment = timestamp if isinstance(timestamp, datetime) else date_parser.isoparse(timestamp)
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=UTC)
    return moment


def round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def _round_half_up(value: float, digits: int) -> float:
    scale = 10 ** digits
    return math.floor(value * scale + 0.5) / scale


def _ago(count: int, unit: str) -> str:
    suffix = "" if count == 1 else "s"
    return f"{count} {unit}{suffix} ago"
