"""Statistics engine for habitlog.

Aggregates check-in records into per-habit and per-day counts and computes
current streaks. Everything here is pure: callers pass the records (usually
a date-filtered slice of the cache snapshot) and a reference date.
"""

from __future__ import annotations

import calendar
from collections import defaultdict
from datetime import date, timedelta
from typing import Iterable

from habitlog.clock import Clock, SystemClock
from habitlog.models import (
    CheckinRecord,
    DateRange,
    DayStat,
    HabitConfig,
    HabitStat,
    Statistics,
)
from habitlog.parser import tag_pattern


def _as_date(value: date | str) -> date:
    return value if isinstance(value, date) else date.fromisoformat(value)


# ── Aggregation ───────────────────────────────────────────────


def compute_statistics(records: list[CheckinRecord], clock: Clock | None = None) -> Statistics:
    """Compute habit, daily and streak statistics for *records*.

    Streaks are measured against *clock*.today(); without a clock that is
    today in UTC, so pass the configured clock to get the user's day.
    """
    clock = clock or SystemClock()
    stats = Statistics(total_checkins=len(records))

    for rec in records:
        habit = stats.habit_stats.get(rec.habit_key)
        if habit is None:
            habit = stats.habit_stats[rec.habit_key] = HabitStat(name=rec.habit_name)
        habit.count += 1
        habit.dates.add(rec.date)

        day = stats.daily_stats.get(rec.date)
        if day is None:
            day = stats.daily_stats[rec.date] = DayStat()
        day.habits.add(rec.habit_key)

    today = clock.today()
    for key, habit in stats.habit_stats.items():
        stats.streaks[key] = compute_streak(habit.dates, today)

    return stats


def compute_streak(dates: Iterable[date | str], today: date) -> int:
    """Consecutive check-in days ending today or yesterday.

    A streak whose latest day is older than yesterday has lapsed and counts
    as zero; today without a check-in yet does not break it.
    """
    ordered = sorted({_as_date(d) for d in dates}, reverse=True)
    if not ordered:
        return 0
    most_recent = ordered[0]
    if most_recent != today and most_recent != today - timedelta(days=1):
        return 0

    streak = 1
    for prev, current in zip(ordered, ordered[1:]):
        if (prev - current).days != 1:
            break
        streak += 1
    return streak


def filter_by_date_range(
    records: list[CheckinRecord],
    start: date | str,
    end: date | str,
) -> list[CheckinRecord]:
    """Records whose date falls within [start, end], original order kept."""
    lo, hi = _as_date(start), _as_date(end)
    return [r for r in records if lo <= _as_date(r.date) <= hi]


# ── Date ranges ───────────────────────────────────────────────

RANGE_KEYS = ("this_week", "last_week", "this_month", "last_month")
CURRENT_RANGES = {"this_week", "this_month"}


def week_bounds(day: date) -> tuple[date, date]:
    """Monday through Sunday of the week containing *day*."""
    start = day - timedelta(days=day.weekday())
    return start, start + timedelta(days=6)


def month_bounds(year: int, month: int) -> tuple[date, date]:
    last = calendar.monthrange(year, month)[1]
    return date(year, month, 1), date(year, month, last)


def date_range(key: str, today: date) -> DateRange:
    if key == "this_week":
        start, end = week_bounds(today)
    elif key == "last_week":
        start, end = week_bounds(today - timedelta(days=7))
    elif key == "this_month":
        start, end = month_bounds(today.year, today.month)
    elif key == "last_month":
        first = today.replace(day=1) - timedelta(days=1)
        start, end = month_bounds(first.year, first.month)
    else:
        raise ValueError(f"Unknown date range: {key!r} (expected one of {', '.join(RANGE_KEYS)})")
    return DateRange(start=start, end=end, key=key)


def recent_days(end: date, n: int = 7) -> list[str]:
    """ISO dates of the *n* days ending at *end*, oldest first."""
    return [(end - timedelta(days=i)).isoformat() for i in range(n - 1, -1, -1)]


def strip_end(rng: DateRange, today: date) -> date:
    """Last day of the check-in strip: today for current periods, else the range end."""
    return today if rng.key in CURRENT_RANGES else rng.end


# ── Presentation helpers ──────────────────────────────────────


def group_by_date(records: list[CheckinRecord]) -> list[tuple[str, list[CheckinRecord]]]:
    """Records grouped per day, newest day first, record order kept within a day."""
    grouped: dict[str, list[CheckinRecord]] = defaultdict(list)
    for rec in records:
        grouped[rec.date].append(rec)
    return sorted(grouped.items(), key=lambda item: item[0], reverse=True)


def ranked_habits(config: HabitConfig, stats: Statistics) -> list[tuple[str, HabitStat]]:
    """Every configured habit with its stat, busiest first.

    Habits without check-ins get an empty stat so they still show up.
    """
    rows = []
    for key, name in config.habits.items():
        rows.append((key, stats.habit_stats.get(key) or HabitStat(name=name)))
    rows.sort(key=lambda row: row[1].count, reverse=True)
    return rows


def checkins_by_day(records: Iterable[CheckinRecord]) -> dict[str, set[str]]:
    """Habit keys checked in per day."""
    days: dict[str, set[str]] = defaultdict(set)
    for rec in records:
        days[rec.date].add(rec.habit_key)
    return dict(days)


def is_checked(checked: dict[str, set[str]], habit_key: str, day: str) -> bool:
    return habit_key in checked.get(day, ())


def record_note(record: CheckinRecord, config: HabitConfig) -> str:
    """The free text of a check-in line, without tag, list marker or generated label."""
    pattern = tag_pattern(config.habit_prefix, record.habit_key)
    text = pattern.sub("", record.raw_line, count=1).strip()
    if text.startswith("-"):
        text = text[1:].strip()
    return text.replace(f"{record.habit_name}{config.checkin_suffix}", "", 1).strip()
