"""Wiring of config, storage, parser, ingestor and cache for one vault."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from pathlib import Path

from habitlog.cache import DEFAULT_TTL_SECONDS, RecordCache
from habitlog.checkin import toggle_checkin
from habitlog.clock import Clock, SystemClock
from habitlog.config import config_path, load_config
from habitlog.ingest import FileIngestor
from habitlog.models import CheckinRecord, DateRange, HabitConfig, Statistics
from habitlog.parser import HabitParser
from habitlog.stats import (
    checkins_by_day,
    compute_statistics,
    date_range,
    filter_by_date_range,
)
from habitlog.storage import JournalStorage, LocalJournalStorage


@dataclass
class RangeView:
    """Statistics for one date range of the current snapshot.

    `checked` maps each day of the whole snapshot to its habit keys, so a
    check-in strip can reach back past the start of the range.
    """

    range: DateRange
    records: list[CheckinRecord] = field(default_factory=list)
    stats: Statistics = field(default_factory=Statistics)
    total_records: int = 0
    checked: dict[str, set[str]] = field(default_factory=dict)


class HabitTracker:
    def __init__(
        self,
        config: HabitConfig,
        storage: JournalStorage,
        clock: Clock | None = None,
        ttl: float = DEFAULT_TTL_SECONDS,
    ) -> None:
        self.config = config
        self.storage = storage
        self.clock = clock or SystemClock(config.timezone)
        self.parser = HabitParser(config, self.clock)
        self.ingestor = FileIngestor(storage, self.parser, config)
        self.cache = RecordCache(
            self.ingestor, config, notifier=storage.notifier, clock=self.clock, ttl=ttl
        )

    @classmethod
    def open(cls, root: Path, clock: Clock | None = None) -> HabitTracker:
        """Tracker over a local vault, configured from its config.yaml."""
        config = load_config(config_path(root))
        return cls(config, LocalJournalStorage(root), clock=clock)

    def today(self) -> date:
        return self.clock.today()

    async def records(self, force_refresh: bool = False) -> list[CheckinRecord]:
        return await self.cache.get_all_records(force_refresh)

    async def view(self, range_key: str = "this_month", force_refresh: bool = False) -> RangeView:
        records = await self.records(force_refresh)
        rng = date_range(range_key, self.today())
        filtered = filter_by_date_range(records, rng.start, rng.end)
        return RangeView(
            range=rng,
            records=filtered,
            stats=compute_statistics(filtered, self.clock),
            total_records=len(records),
            checked=checkins_by_day(records),
        )

    async def toggle(self, key: str, day: str, checked: bool) -> str:
        return await toggle_checkin(self.storage, self.config, key, day, checked)

    def close(self) -> None:
        self.cache.close()
