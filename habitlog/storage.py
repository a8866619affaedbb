"""Journal storage: the file lister/reader/notifier the core consumes.

`JournalStorage` is the contract a host application provides.
`LocalJournalStorage` implements it over a plain directory so the core can
run standalone; its own writes are reported through the change notifier the
way a host reports edits made in its editor.
"""

from __future__ import annotations

import asyncio
import re
from pathlib import Path, PurePosixPath
from typing import Callable, Protocol

import structlog

from habitlog.fileio import write_text_atomic
from habitlog.models import ChangeEvent, JournalFile

logger = structlog.get_logger()

JOURNAL_FILENAME = re.compile(r"^\d{4}-\d{2}-\d{2}\.md$")

ChangeCallback = Callable[[ChangeEvent], None]


def is_journal_path(path: str, journals_path: str) -> bool:
    """True for date-named markdown files under the journals folder."""
    if not path.startswith(journals_path):
        return False
    return bool(JOURNAL_FILENAME.match(PurePosixPath(path).name))


class ChangeNotifier:
    """Fan-out of create/modify/delete events to subscribed callbacks."""

    def __init__(self) -> None:
        self._subscribers: list[ChangeCallback] = []

    def subscribe(self, callback: ChangeCallback) -> Callable[[], None]:
        self._subscribers.append(callback)
        return lambda: self.unsubscribe(callback)

    def unsubscribe(self, callback: ChangeCallback) -> None:
        if callback in self._subscribers:
            self._subscribers.remove(callback)

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)

    def emit(self, event: ChangeEvent) -> None:
        for callback in list(self._subscribers):
            try:
                callback(event)
            except Exception:
                logger.exception("change_callback_failed", kind=event.kind, path=event.path)


class JournalStorage(Protocol):
    notifier: ChangeNotifier

    async def list_files(self, prefix: str) -> list[JournalFile]: ...

    async def read(self, file: JournalFile) -> str: ...

    def exists(self, path: str) -> bool: ...

    async def create(self, path: str, content: str) -> JournalFile: ...

    async def modify(self, path: str, content: str) -> JournalFile: ...

    async def delete(self, path: str) -> None: ...


class LocalJournalStorage:
    """Markdown vault rooted at a directory on the local filesystem."""

    def __init__(self, root: Path, notifier: ChangeNotifier | None = None) -> None:
        self.root = Path(root)
        self.notifier = notifier or ChangeNotifier()

    def _abs(self, path: str) -> Path:
        return self.root / PurePosixPath(path)

    def _handle(self, path: str) -> JournalFile:
        return JournalFile(path=path, name=PurePosixPath(path).name)

    def _list_sync(self, prefix: str) -> list[JournalFile]:
        files = []
        for p in self.root.rglob("*.md"):
            if not p.is_file():
                continue
            rel = p.relative_to(self.root).as_posix()
            if rel.startswith(prefix):
                files.append(self._handle(rel))
        files.sort(key=lambda f: f.path)
        return files

    async def list_files(self, prefix: str) -> list[JournalFile]:
        if not self.root.is_dir():
            raise FileNotFoundError(f"Vault not found: {self.root}")
        return await asyncio.to_thread(self._list_sync, prefix)

    async def read(self, file: JournalFile) -> str:
        path = self._abs(file.path)
        return await asyncio.to_thread(path.read_text, encoding="utf-8")

    def exists(self, path: str) -> bool:
        return self._abs(path).is_file()

    async def create(self, path: str, content: str) -> JournalFile:
        if self.exists(path):
            raise FileExistsError(path)
        await asyncio.to_thread(write_text_atomic, self._abs(path), content)
        self.notifier.emit(ChangeEvent("create", path))
        return self._handle(path)

    async def modify(self, path: str, content: str) -> JournalFile:
        if not self.exists(path):
            raise FileNotFoundError(path)
        await asyncio.to_thread(write_text_atomic, self._abs(path), content)
        self.notifier.emit(ChangeEvent("modify", path))
        return self._handle(path)

    async def delete(self, path: str) -> None:
        await asyncio.to_thread(self._abs(path).unlink)
        self.notifier.emit(ChangeEvent("delete", path))
