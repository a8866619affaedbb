"""habitlog core library: habit check-ins parsed from dated journals.

Public API re-exports for convenient imports:
    from habitlog import HabitParser, RecordCache, compute_statistics, ...
"""

# Models
from habitlog.models import (
    ConfigError,
    HabitConfig,
    CheckinRecord,
    JournalFile,
    ChangeEvent,
    HabitStat,
    DayStat,
    Statistics,
    DateRange,
)

# Workspace & config
from habitlog.config import (
    workspace_root,
    config_path,
    load_config,
    ensure_config,
)

# Clock
from habitlog.clock import Clock, SystemClock, FixedClock

# Parsing
from habitlog.parser import HabitParser, extract_date

# Storage
from habitlog.storage import (
    ChangeNotifier,
    JournalStorage,
    LocalJournalStorage,
    is_journal_path,
)

# Ingestion & cache
from habitlog.ingest import FileIngestor, select_candidates, DEFAULT_BATCH_SIZE
from habitlog.cache import CacheState, RecordCache, Snapshot, DEFAULT_TTL_SECONDS

# Statistics
from habitlog.stats import (
    compute_statistics,
    compute_streak,
    filter_by_date_range,
    date_range,
    recent_days,
    group_by_date,
    ranked_habits,
    record_note,
)

# Check-in toggling
from habitlog.checkin import add_checkin, remove_checkin, toggle_checkin

# Wiring
from habitlog.tracker import HabitTracker, RangeView
