"""townsync - Async sync of a published tourism-town sheet into an in-memory snapshot."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("townsync")
except PackageNotFoundError:
    __version__ = "0+local"
from townsync.config import ColumnMap, RecordDefaults, SyncConfig
from townsync.controller import SyncController
from townsync.exceptions import (
    FetchError,
    RowParseError,
    TownSyncConfigError,
    TownSyncError,
)
from townsync.ingestion import NormalizeResult, SkippedRow, ingest_csv, normalize, parse_csv_text
from townsync.models import Language, TownInfo, TownRecord
from townsync.state.events import STATUS_DISPLAY, SyncResult, SyncState, SyncStatus
from townsync.state.fingerprint import fingerprint, has_changed
from townsync.state.store import Snapshot, SnapshotStore

__all__ = [
    "__version__",
    "ColumnMap",
    "FetchError",
    "Language",
    "NormalizeResult",
    "RecordDefaults",
    "RowParseError",
    "STATUS_DISPLAY",
    "SkippedRow",
    "Snapshot",
    "SnapshotStore",
    "SyncConfig",
    "SyncController",
    "SyncResult",
    "SyncState",
    "SyncStatus",
    "TownInfo",
    "TownRecord",
    "TownSyncConfigError",
    "TownSyncError",
    "fingerprint",
    "has_changed",
    "ingest_csv",
    "normalize",
    "parse_csv_text",
]
