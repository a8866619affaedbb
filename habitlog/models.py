"""Typed dataclasses for the habitlog data model.

Config uses from_dict/to_dict for YAML serialization; both snake_case and
the legacy camelCase keys are accepted on input. Unknown keys are ignored;
missing keys use defaults.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Any


class ConfigError(ValueError):
    """Raised when a configuration document is structurally invalid."""


# ── Configuration ─────────────────────────────────────────────


DEFAULT_HABITS: dict[str, str] = {
    "reading": "阅读",
    "exercise": "运动",
    "meditation": "冥想",
    "study": "学习",
    "water": "喝水",
    "sleep": "早睡",
}

DEFAULT_APP_NAME = "掌控习惯"


@dataclass
class HabitConfig:
    habits: dict[str, str] = field(default_factory=lambda: dict(DEFAULT_HABITS))
    habit_prefix: str = "#"
    journals_path: str = "journals"
    app_name: str = DEFAULT_APP_NAME
    checkin_suffix: str = "打卡"
    timezone: str = "UTC"

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> HabitConfig:
        if not d or not isinstance(d, dict):
            return cls()
        habits = d.get("habits")
        if habits is None:
            habits = dict(DEFAULT_HABITS)
        elif not isinstance(habits, dict):
            raise ConfigError(f"habits must be a mapping, got {type(habits).__name__}")
        return cls(
            habits={str(k): str(v) for k, v in habits.items()},
            habit_prefix=str(d.get("habit_prefix", d.get("habitPrefix", "#"))),
            journals_path=str(d.get("journals_path", d.get("journalsPath", "journals"))),
            app_name=str(d.get("app_name", d.get("appName", "")) or DEFAULT_APP_NAME),
            checkin_suffix=str(d.get("checkin_suffix", d.get("checkinSuffix", "打卡"))),
            timezone=str(d.get("timezone", "UTC")),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "app_name": self.app_name,
            "habits": dict(self.habits),
            "habit_prefix": self.habit_prefix,
            "journals_path": self.journals_path,
            "checkin_suffix": self.checkin_suffix,
            "timezone": self.timezone,
        }

    def validate(self) -> HabitConfig:
        """Check invariants; returns self so it can be chained after from_dict."""
        if not self.habits:
            raise ConfigError("at least one habit must be configured")
        if not self.habit_prefix:
            raise ConfigError("habit_prefix must not be empty")
        for key, name in self.habits.items():
            if not key.strip():
                raise ConfigError("habit keys must not be blank")
            if any(ch.isspace() for ch in key):
                raise ConfigError(f"habit key {key!r} contains whitespace")
            if not name.strip():
                raise ConfigError(f"habit {key!r} has an empty display name")
        return self

    def sorted_keys(self) -> list[str]:
        """Habit keys longest-first so `reading` is tried before `read`."""
        return sorted(self.habits, key=lambda k: (-len(k), k))

    def tag(self, key: str) -> str:
        return f"{self.habit_prefix}{key}"


# ── Records ───────────────────────────────────────────────────


@dataclass(frozen=True)
class CheckinRecord:
    """One habit tag found on one line of one dated journal file."""

    date: str
    habit_key: str
    habit_name: str
    raw_line: str


# ── Storage ───────────────────────────────────────────────────


@dataclass(frozen=True)
class JournalFile:
    path: str  # vault-relative, POSIX separators
    name: str


CHANGE_KINDS = ("create", "modify", "delete")


@dataclass(frozen=True)
class ChangeEvent:
    kind: str  # create, modify, delete
    path: str

    def __post_init__(self) -> None:
        if self.kind not in CHANGE_KINDS:
            raise ValueError(f"Invalid change kind: {self.kind!r}")


# ── Statistics ────────────────────────────────────────────────


@dataclass
class HabitStat:
    name: str
    count: int = 0
    dates: set[str] = field(default_factory=set)

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "count": self.count, "dates": sorted(self.dates)}


@dataclass
class DayStat:
    habits: set[str] = field(default_factory=set)

    @property
    def count(self) -> int:
        return len(self.habits)

    def to_dict(self) -> dict[str, Any]:
        return {"habits": sorted(self.habits), "count": self.count}


@dataclass
class Statistics:
    total_checkins: int = 0
    habit_stats: dict[str, HabitStat] = field(default_factory=dict)
    daily_stats: dict[str, DayStat] = field(default_factory=dict)
    streaks: dict[str, int] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "totalCheckins": self.total_checkins,
            "habitStats": {k: v.to_dict() for k, v in self.habit_stats.items()},
            "dailyStats": {k: v.to_dict() for k, v in self.daily_stats.items()},
            "streaks": dict(self.streaks),
        }


@dataclass(frozen=True)
class DateRange:
    start: date
    end: date
    key: str = ""

    def to_strs(self) -> tuple[str, str]:
        return self.start.isoformat(), self.end.isoformat()
