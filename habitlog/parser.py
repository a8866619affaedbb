"""Journal line parsing: habit tags → check-in records."""

from __future__ import annotations

import re

from habitlog.clock import Clock, SystemClock
from habitlog.models import CheckinRecord, HabitConfig

DATE_IN_PATH = re.compile(r"(\d{4}-\d{2}-\d{2})")


def extract_date(path: str) -> str | None:
    """Return the first YYYY-MM-DD found anywhere in *path*."""
    m = DATE_IN_PATH.search(path)
    return m.group(1) if m else None


def tag_pattern(prefix: str, key: str) -> re.Pattern[str]:
    """Case-insensitive pattern for `prefix + key` not followed by an ASCII word character.

    Only ASCII letters, digits and underscore extend a tag, so `#reading阅读打卡`
    is a `reading` check-in while `#readings` is not.
    """
    return re.compile(re.escape(prefix + key) + r"(?![A-Za-z0-9_])", re.IGNORECASE)


class HabitParser:
    """Extracts check-in records from journal text.

    Keys are matched longest-first; each key must not run on into another
    ASCII word character, so `#reading` counts for `reading` and never for
    `read`.
    """

    def __init__(self, config: HabitConfig, clock: Clock | None = None) -> None:
        self.config = config
        self.clock = clock or SystemClock(config.timezone)
        self._patterns = [
            (key, tag_pattern(config.habit_prefix, key))
            for key in config.sorted_keys()
        ]

    def parse_line(self, line: str, day: str) -> list[CheckinRecord]:
        if self.config.habit_prefix not in line:
            return []
        raw = line.strip()
        return [
            CheckinRecord(
                date=day,
                habit_key=key,
                habit_name=self.config.habits[key],
                raw_line=raw,
            )
            for key, pattern in self._patterns
            if pattern.search(line)
        ]

    def parse_file_content(self, content: str, file_path: str) -> list[CheckinRecord]:
        # Undated files fall back to today rather than being rejected.
        day = extract_date(file_path) or self.clock.today().isoformat()
        records: list[CheckinRecord] = []
        for line in content.split("\n"):
            records.extend(self.parse_line(line, day))
        return records
