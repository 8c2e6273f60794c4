from __future__ import annotations

from datetime import UTC, datetime

import pytest

from repo_analyzer.services.formatting import (
    format_long_date,
    format_magnitude,
    format_relative_time,
    format_short_date,
    month_label,
    relative_time_since,
    round_half_up,
)


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        (0, "0"),
        (999, "999"),
        (1000, "1.0k"),
        (1500, "1.5k"),
        (12345, "12.3k"),
        (2_500_000, "2.5M"),
    ],
)
def test_format_magnitude(value: int, expected: str) -> None:
    assert format_magnitude(value) == expected


@pytest.mark.parametrize(
    ("seconds", "expected"),
    [
        (0, "just now"),
        (59, "just now"),
        (60, "1 minute ago"),
        (119, "1 minute ago"),
        (120, "2 minutes ago"),
        (3599, "59 minutes ago"),
        (3600, "1 hour ago"),
        (86399, "23 hours ago"),
        (86400, "1 day ago"),
        (29 * 86400, "29 days ago"),
        (30 * 86400, "1 month ago"),
        (359 * 86400, "11 months ago"),
        (360 * 86400, "1 year ago"),
        (3 * 360 * 86400, "3 years ago"),
    ],
)
def test_format_relative_time_thresholds(seconds: int, expected: str) -> None:
    assert format_relative_time(seconds) == expected


def test_relative_time_since_accepts_github_timestamps() -> None:
    now = datetime(2024, 3, 20, 12, 0, tzinfo=UTC)

    assert relative_time_since("2024-03-20T09:00:00Z", now) == "3 hours ago"
    assert relative_time_since("2024-03-21T09:00:00Z", now) == "just now"


def test_date_formats() -> None:
    assert format_long_date("2020-01-05T10:00:00Z") == "January 5, 2020"
    assert format_short_date(datetime(2026, 10, 8)) == "10/8/2026"


def test_month_label_uses_utc() -> None:
    assert month_label(1704067200) == "Jan"  # 2024-01-01T00:00:00Z
    assert month_label(1704067199) == "Dec"


def test_round_half_up_differs_from_bankers_rounding() -> None:
    assert round_half_up(6.5) == 7
    assert round_half_up(2.5) == 3
    assert round_half_up(2.49) == 2
