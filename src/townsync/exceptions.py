"""Custom exception hierarchy for townsync."""

from __future__ import annotations


class TownSyncError(Exception):
    """Base exception for all townsync errors."""


class TownSyncConfigError(TownSyncError):
    """Invalid or missing configuration."""


class FetchError(TownSyncError):
    """The sheet export could not be fetched (network, non-2xx, timeout)."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        url: str = "",
    ) -> None:
        self.status_code = status_code
        self.url = url
        super().__init__(message)


class RowParseError(TownSyncError):
    """A single data row could not be turned into a town record.

    Raised and caught inside the normalizer; callers only ever see the
    skip count and reasons on :class:`townsync.ingestion.normalize.NormalizeResult`.
    """

    def __init__(self, reason: str, *, line: int = 0) -> None:
        self.reason = reason
        self.line = line
        super().__init__(f"row {line}: {reason}")
