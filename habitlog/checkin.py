"""Adding and removing habit check-ins in journal files.

Checking a habit appends a generated line (`- #reading 阅读打卡`) to the day
file, creating the file if needed. Unchecking drops generated lines and bare
tags, and strips the tag out of any other line that carries it while
keeping the rest of its text.
"""

from __future__ import annotations

import re
from datetime import date

from habitlog.models import HabitConfig, JournalFile
from habitlog.parser import tag_pattern
from habitlog.storage import JournalStorage


def checkin_line(config: HabitConfig, key: str) -> str:
    return f"- {config.tag(key)} {config.habits[key]}{config.checkin_suffix}"


def journal_path(config: HabitConfig, day: str) -> str:
    return f"{config.journals_path.rstrip('/')}/{day}.md"


def new_journal_content(day: str) -> str:
    d = date.fromisoformat(day)
    return f"# {d.year}年{d.month}月{d.day}日\n\n"


def add_checkin(content: str, config: HabitConfig, key: str) -> str:
    if content and not content.endswith("\n"):
        content += "\n"
    return content + checkin_line(config, key) + "\n"


def remove_checkin(content: str, config: HabitConfig, key: str) -> str:
    generated = checkin_line(config, key)
    tag = config.tag(key)
    pattern = tag_pattern(config.habit_prefix, key)

    kept = []
    for line in content.split("\n"):
        stripped = line.strip()
        if stripped == generated or stripped.lower() == tag.lower():
            continue
        if pattern.search(line):
            remainder = re.sub(r"\s+", " ", pattern.sub(" ", line)).strip()
            if remainder and remainder != "-":
                kept.append(remainder)
            continue
        kept.append(line)
    return "\n".join(kept)


def has_checkin(content: str, config: HabitConfig, key: str) -> bool:
    pattern = tag_pattern(config.habit_prefix, key)
    return any(pattern.search(line) for line in content.split("\n"))


async def toggle_checkin(
    storage: JournalStorage,
    config: HabitConfig,
    key: str,
    day: str,
    checked: bool,
) -> str:
    """Check or uncheck *key* for *day*; returns the new file content.

    The write goes through the storage, whose change notification
    invalidates any record cache listening on it.
    """
    if key not in config.habits:
        raise KeyError(f"Unknown habit: {key}")
    path = journal_path(config, day)

    if not storage.exists(path):
        if not checked:
            return ""
        await storage.create(path, new_journal_content(day))

    content = await storage.read(JournalFile(path=path, name=f"{day}.md"))
    if checked:
        content = add_checkin(content, config, key)
    else:
        content = remove_checkin(content, config, key)
    await storage.modify(path, content)
    return content
