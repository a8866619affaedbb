"""Tests for habitlog/stats.py: aggregation, streaks and date ranges."""

from datetime import date, timedelta

import pytest

from habitlog.clock import FixedClock, SystemClock
from habitlog.models import CheckinRecord, HabitConfig, Statistics
from habitlog.stats import (
    checkins_by_day,
    compute_statistics,
    compute_streak,
    date_range,
    filter_by_date_range,
    group_by_date,
    is_checked,
    ranked_habits,
    recent_days,
    record_note,
    strip_end,
)

TODAY = date(2024, 5, 10)


def days_ago(n: int) -> str:
    return (TODAY - timedelta(days=n)).isoformat()


def rec(day: str, key: str = "reading", name: str = "阅读", line: str = "") -> CheckinRecord:
    return CheckinRecord(day, key, name, line or f"- #{key}")


# ── Streaks ───────────────────────────────────────────────────


def test_streak_three_consecutive_days():
    assert compute_streak({days_ago(0), days_ago(1), days_ago(2)}, TODAY) == 3


def test_streak_gap_at_yesterday():
    assert compute_streak({days_ago(0), days_ago(2)}, TODAY) == 1


def test_streak_lapsed():
    assert compute_streak({days_ago(3)}, TODAY) == 0


def test_streak_empty():
    assert compute_streak(set(), TODAY) == 0


def test_streak_alive_through_yesterday():
    assert compute_streak({days_ago(1), days_ago(2), days_ago(3), days_ago(5)}, TODAY) == 3


def test_streak_future_dates_do_not_count():
    assert compute_streak({(TODAY + timedelta(days=1)).isoformat()}, TODAY) == 0


def test_streak_accepts_dates_and_unsorted_input():
    assert compute_streak([TODAY - timedelta(days=1), TODAY], TODAY) == 2


def test_streak_across_month_boundary():
    today = date(2024, 3, 1)
    assert compute_streak({"2024-02-28", "2024-02-29", "2024-03-01"}, today) == 3


# ── Aggregation ───────────────────────────────────────────────


def test_compute_statistics():
    records = [
        rec(days_ago(0)),
        rec(days_ago(0), line="- #reading again"),
        rec(days_ago(1)),
        rec(days_ago(1), "water", "喝水"),
        rec(days_ago(4), "water", "喝水"),
    ]
    stats = compute_statistics(records, FixedClock(TODAY))

    assert stats.total_checkins == 5
    assert stats.habit_stats["reading"].count == 3
    assert stats.habit_stats["reading"].dates == {days_ago(0), days_ago(1)}
    assert stats.habit_stats["water"].name == "喝水"
    assert stats.daily_stats[days_ago(0)].habits == {"reading"}
    assert stats.daily_stats[days_ago(0)].count == 1
    assert stats.daily_stats[days_ago(1)].count == 2
    assert stats.streaks == {"reading": 2, "water": 1}


def test_compute_statistics_empty():
    stats = compute_statistics([], FixedClock(TODAY))
    assert stats == Statistics()


def test_compute_statistics_does_not_touch_input():
    records = [rec(days_ago(0))]
    compute_statistics(records, FixedClock(TODAY))
    assert records == [rec(days_ago(0))]


def test_compute_statistics_defaults_to_utc_today():
    today = SystemClock("UTC").today()
    stats = compute_statistics([rec(today.isoformat())])
    assert stats.streaks == {"reading": 1}


# ── Filtering ─────────────────────────────────────────────────


def test_filter_by_date_range_inclusive_and_stable():
    records = [rec("2024-05-03"), rec("2024-04-30"), rec("2024-05-01"), rec("2024-05-31"), rec("2024-06-01")]
    result = filter_by_date_range(records, "2024-05-01", "2024-05-31")
    assert [r.date for r in result] == ["2024-05-03", "2024-05-01", "2024-05-31"]


def test_filter_by_date_range_idempotent():
    records = [rec(days_ago(n)) for n in range(20)]
    once = filter_by_date_range(records, days_ago(10), days_ago(3))
    twice = filter_by_date_range(once, days_ago(10), days_ago(3))
    assert twice == once


def test_filter_by_date_range_accepts_dates():
    records = [rec("2024-05-01")]
    assert filter_by_date_range(records, date(2024, 5, 1), date(2024, 5, 1)) == records


# ── Date ranges ───────────────────────────────────────────────


def test_this_week_is_monday_to_sunday():
    rng = date_range("this_week", date(2024, 5, 10))  # Friday
    assert (rng.start, rng.end) == (date(2024, 5, 6), date(2024, 5, 12))


def test_this_week_on_sunday():
    rng = date_range("this_week", date(2024, 5, 12))
    assert (rng.start, rng.end) == (date(2024, 5, 6), date(2024, 5, 12))


def test_last_week():
    rng = date_range("last_week", date(2024, 5, 6))
    assert (rng.start, rng.end) == (date(2024, 4, 29), date(2024, 5, 5))


def test_this_month():
    rng = date_range("this_month", date(2024, 2, 15))
    assert rng.to_strs() == ("2024-02-01", "2024-02-29")


def test_last_month_across_year():
    rng = date_range("last_month", date(2024, 1, 31))
    assert rng.to_strs() == ("2023-12-01", "2023-12-31")


def test_unknown_range():
    with pytest.raises(ValueError):
        date_range("next_year", TODAY)


def test_recent_days():
    assert recent_days(date(2024, 5, 2), 3) == ["2024-04-30", "2024-05-01", "2024-05-02"]
    assert len(recent_days(TODAY)) == 7


def test_strip_end():
    assert strip_end(date_range("this_month", TODAY), TODAY) == TODAY
    assert strip_end(date_range("last_month", TODAY), TODAY) == date(2024, 4, 30)


# ── Presentation helpers ──────────────────────────────────────


def test_group_by_date_newest_first():
    records = [rec("2024-05-01"), rec("2024-05-03", "water", "喝水"), rec("2024-05-01", "water", "喝水")]
    groups = group_by_date(records)
    assert [d for d, _ in groups] == ["2024-05-03", "2024-05-01"]
    assert [r.habit_key for r in groups[1][1]] == ["reading", "water"]


def test_ranked_habits_includes_unused():
    config = HabitConfig(habits={"reading": "阅读", "water": "喝水", "sleep": "早睡"})
    stats = compute_statistics([rec(days_ago(0), "water", "喝水")] * 2 + [rec(days_ago(0))], FixedClock(TODAY))
    ranked = ranked_habits(config, stats)
    assert [k for k, _ in ranked] == ["water", "reading", "sleep"]
    assert ranked[2][1].count == 0
    assert ranked[2][1].name == "早睡"


def test_checkins_by_day():
    records = [rec("2024-05-01"), rec("2024-05-01", "water", "喝水"), rec("2024-05-01"), rec("2024-05-03")]
    assert checkins_by_day(records) == {"2024-05-01": {"reading", "water"}, "2024-05-03": {"reading"}}
    assert checkins_by_day([]) == {}


def test_is_checked():
    checked = checkins_by_day([rec("2024-05-01")])
    assert is_checked(checked, "reading", "2024-05-01")
    assert not is_checked(checked, "water", "2024-05-01")
    assert not is_checked(checked, "reading", "2024-05-02")


def test_record_note():
    config = HabitConfig()
    assert record_note(rec("2024-05-01", line="- #reading finished chapter 3"), config) == "finished chapter 3"
    assert record_note(rec("2024-05-01", line="- #reading 阅读打卡"), config) == ""
    assert record_note(rec("2024-05-01", line="- #Reading Dune"), config) == "Dune"
