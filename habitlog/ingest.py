"""Batched ingestion of dated journal files into check-in records."""

from __future__ import annotations

import asyncio

import structlog

from habitlog.models import CheckinRecord, HabitConfig, JournalFile
from habitlog.parser import HabitParser
from habitlog.storage import JOURNAL_FILENAME, JournalStorage

logger = structlog.get_logger()

DEFAULT_BATCH_SIZE = 50


def select_candidates(files: list[JournalFile], journals_path: str) -> list[JournalFile]:
    """Keep files under the journals path named exactly YYYY-MM-DD.md."""
    return [
        f for f in files
        if f.path.startswith(journals_path) and JOURNAL_FILENAME.match(f.name)
    ]


def batched(items: list, size: int) -> list[list]:
    return [items[i:i + size] for i in range(0, len(items), size)]


class FileIngestor:
    """Reads journal files in sequential batches with concurrent reads inside each.

    A file that cannot be read contributes no records; listing failures are
    not caught here.
    """

    def __init__(
        self,
        storage: JournalStorage,
        parser: HabitParser,
        config: HabitConfig,
        batch_size: int = DEFAULT_BATCH_SIZE,
    ) -> None:
        if batch_size < 1:
            raise ValueError(f"batch_size must be positive, got {batch_size}")
        self.storage = storage
        self.parser = parser
        self.config = config
        self.batch_size = batch_size

    async def ingest_all(self, files: list[JournalFile] | None = None) -> list[CheckinRecord]:
        if files is None:
            files = await self.storage.list_files(self.config.journals_path)
        candidates = select_candidates(files, self.config.journals_path)
        logger.debug("ingest_started", total_files=len(files), candidates=len(candidates))

        records: list[CheckinRecord] = []
        for batch in batched(candidates, self.batch_size):
            # gather keeps results in submission order
            results = await asyncio.gather(*(self._ingest_file(f) for f in batch))
            for file_records in results:
                records.extend(file_records)

        logger.info("ingest_finished", files=len(candidates), records=len(records))
        return records

    async def _ingest_file(self, file: JournalFile) -> list[CheckinRecord]:
        try:
            content = await self.storage.read(file)
        except Exception as e:
            logger.warning("journal_read_failed", path=file.path, error=str(e))
            return []
        return self.parser.parse_file_content(content, file.path)
