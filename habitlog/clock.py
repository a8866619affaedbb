"""Current-time sources for habitlog.

Streaks depend on "today" and the record cache on elapsed time, so both go
through a Clock that tests can pin.
"""

from __future__ import annotations

import time
from datetime import date, datetime
from typing import Protocol
from zoneinfo import ZoneInfo


class Clock(Protocol):
    def today(self) -> date: ...

    def monotonic(self) -> float: ...


class SystemClock:
    """Wall-clock date in the user's timezone, monotonic seconds for ageing."""

    def __init__(self, tz: str | ZoneInfo = "UTC") -> None:
        self.tz = tz if isinstance(tz, ZoneInfo) else ZoneInfo(tz)

    def today(self) -> date:
        return datetime.now(self.tz).date()

    def monotonic(self) -> float:
        return time.monotonic()


class FixedClock:
    """Manually driven clock for tests."""

    def __init__(self, today: date | str, now: float = 0.0) -> None:
        self._today = date.fromisoformat(today) if isinstance(today, str) else today
        self._now = now

    def today(self) -> date:
        return self._today

    def monotonic(self) -> float:
        return self._now

    def advance(self, seconds: float) -> None:
        self._now += seconds

    def set_today(self, day: date | str) -> None:
        self._today = date.fromisoformat(day) if isinstance(day, str) else day
