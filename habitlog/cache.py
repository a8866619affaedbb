"""Time-boxed snapshot of all check-in records.

The cache is FRESH while it holds a snapshot younger than the TTL and STALE
otherwise. Change events for journal files drop the snapshot; the next read
rebuilds it through the ingestor. Concurrent readers during a stale period
may each rebuild; rebuilds are idempotent. A rebuild that overlaps an
invalidation returns its records but does not store them.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

import structlog

from habitlog.clock import Clock, SystemClock
from habitlog.ingest import FileIngestor
from habitlog.models import ChangeEvent, CheckinRecord, HabitConfig
from habitlog.storage import ChangeNotifier, is_journal_path

logger = structlog.get_logger()

DEFAULT_TTL_SECONDS = 30.0


class CacheState(Enum):
    FRESH = "fresh"
    STALE = "stale"


@dataclass(frozen=True)
class Snapshot:
    records: list[CheckinRecord]
    captured_at: float

    def age(self, now: float) -> float:
        return now - self.captured_at


class RecordCache:
    def __init__(
        self,
        ingestor: FileIngestor,
        config: HabitConfig,
        notifier: ChangeNotifier | None = None,
        clock: Clock | None = None,
        ttl: float = DEFAULT_TTL_SECONDS,
    ) -> None:
        self.ingestor = ingestor
        self.config = config
        self.clock = clock or SystemClock(config.timezone)
        self.ttl = ttl
        self.rebuild_count = 0
        self._snapshot: Snapshot | None = None
        self._generation = 0
        self._unsubscribe = notifier.subscribe(self.handle_change) if notifier else None

    @property
    def snapshot(self) -> Snapshot | None:
        return self._snapshot

    @property
    def state(self) -> CacheState:
        if self._snapshot is None:
            return CacheState.STALE
        if self._snapshot.age(self.clock.monotonic()) >= self.ttl:
            return CacheState.STALE
        return CacheState.FRESH

    async def get_all_records(self, force_refresh: bool = False) -> list[CheckinRecord]:
        if force_refresh:
            self.invalidate()

        snapshot = self._snapshot
        if snapshot is not None and self.state is CacheState.FRESH:
            logger.debug("record_cache_hit", records=len(snapshot.records))
            return snapshot.records

        logger.info("record_cache_rebuild", forced=force_refresh)
        generation = self._generation
        records = await self.ingestor.ingest_all()
        self.rebuild_count += 1
        if generation != self._generation:
            # Invalidated while reading; these records may predate the change.
            logger.debug("record_cache_rebuild_discarded")
            return records
        self._snapshot = Snapshot(records=records, captured_at=self.clock.monotonic())
        return records

    def invalidate(self) -> None:
        if self._snapshot is not None:
            logger.debug("record_cache_invalidated")
        self._generation += 1
        self._snapshot = None

    def handle_change(self, event: ChangeEvent) -> None:
        if is_journal_path(event.path, self.config.journals_path):
            self.invalidate()

    def close(self) -> None:
        """Stop listening for change events. Safe to call twice."""
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    def __enter__(self) -> RecordCache:
        return self

    def __exit__(self, *exc) -> None:
        self.close()
