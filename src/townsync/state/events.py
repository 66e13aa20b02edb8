"""Sync status, state and cycle results.

Only the sync controller mutates :class:`SyncState`; everything else
reads it.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum

from pydantic import BaseModel, ConfigDict


class SyncStatus(StrEnum):
    IDLE = "idle"
    UPDATING = "updating"
    UPDATED = "updated"
    UNCHANGED = "unchanged"
    ERROR = "error"


#: ``(icon, text)`` pairs handed to the status sink.
STATUS_DISPLAY: dict[SyncStatus, tuple[str, str]] = {
    SyncStatus.IDLE: ("⚪", "En espera"),
    SyncStatus.UPDATING: ("🔄", "Actualizando datos..."),
    SyncStatus.UPDATED: ("🟢", "Datos actualizados"),
    SyncStatus.UNCHANGED: ("🟢", "Sin cambios"),
    SyncStatus.ERROR: ("❌", "Error de conexión"),
}


class SyncResult(BaseModel):
    """Outcome of one completed sync cycle."""

    model_config = ConfigDict(frozen=True)

    status: SyncStatus
    manual: bool = False
    fingerprint: int | None = None
    record_count: int = 0
    skipped: int = 0
    published: bool = False
    error: str | None = None


@dataclass
class SyncState:
    """Process-wide sync bookkeeping owned by one controller."""

    is_updating: bool = False
    last_fingerprint: int | None = None
    last_status: SyncStatus = SyncStatus.IDLE
    last_error: str | None = None
    last_result: SyncResult | None = None
    cycles: int = 0
