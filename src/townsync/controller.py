"""Polling sync controller for the tourism sheet."""

from __future__ import annotations

import asyncio
import contextlib
import logging
from collections.abc import Callable
from typing import Any

import aiohttp

from townsync._transport import HttpSheetSource, SheetSource
from townsync.config import SyncConfig
from townsync.exceptions import FetchError, TownSyncError
from townsync.ingestion.normalize import ingest_csv
from townsync.models.town import Language, TownInfo, TownRecord
from townsync.state.events import STATUS_DISPLAY, SyncResult, SyncState, SyncStatus
from townsync.state.fingerprint import fingerprint, has_changed
from townsync.state.store import Snapshot, SnapshotStore

_logger = logging.getLogger(__name__)

StatusSink = Callable[[str, str], None]
UpdateListener = Callable[[], None]


class SyncController:
    """Keeps a town snapshot in sync with the sheet export.

    Usage::

        async with SyncController(SyncConfig()) as controller:
            controller.add_listener(redraw_markers)
            await controller.start()
            ...

    Every trigger (timer tick, :meth:`refresh`, :meth:`request_refresh`)
    goes through :meth:`sync`, which is a no-op while another cycle is in
    flight.
    """

    def __init__(
        self,
        config: SyncConfig | None = None,
        *,
        source: SheetSource | None = None,
        session: aiohttp.ClientSession | None = None,
        on_status: StatusSink | None = None,
    ) -> None:
        self._config = config or SyncConfig()
        self._source = source
        self._external_session = session is not None
        self._http_session = session
        self._on_status = on_status
        self._store = SnapshotStore(defaults=self._config.defaults)
        self._state = SyncState()
        self._listeners: list[UpdateListener] = []
        self._poll_task: asyncio.Task[None] | None = None
        self._tick_tasks: set[asyncio.Task[Any]] = set()

    # ------------------------------------------------------------------
    # Context manager lifecycle
    # ------------------------------------------------------------------

    async def __aenter__(self) -> SyncController:
        if self._source is None:
            if self._http_session is None:
                self._http_session = aiohttp.ClientSession()
            self._source = HttpSheetSource(self._config, self._http_session)
        return self

    async def __aexit__(self, *exc: Any) -> None:
        await self.stop()
        if not self._external_session and self._http_session is not None:
            await self._http_session.close()
            self._http_session = None
            self._source = None

    # ------------------------------------------------------------------
    # Read access
    # ------------------------------------------------------------------

    @property
    def config(self) -> SyncConfig:
        return self._config

    @property
    def state(self) -> SyncState:
        return self._state

    @property
    def snapshot(self) -> Snapshot:
        """The current snapshot. Replaced as a whole on every accepted update."""
        return self._store.current

    @property
    def phase(self) -> SyncStatus:
        return SyncStatus.UPDATING if self._state.is_updating else SyncStatus.IDLE

    @property
    def is_running(self) -> bool:
        return self._poll_task is not None and not self._poll_task.done()

    def lookup(self, name: str) -> TownRecord | None:
        return self._store.lookup(name)

    def town_info(self, name: str, language: Language | str = Language.ES) -> TownInfo:
        return self._store.town_info(name, language)

    # ------------------------------------------------------------------
    # Listeners and status
    # ------------------------------------------------------------------

    def add_listener(self, listener: UpdateListener) -> Callable[[], None]:
        """Call *listener* (no arguments) after every accepted update.

        Listeners run once the cycle is over: ``state`` already holds the
        final result and the in-flight flag is cleared.

        Returns a callable that unregisters the listener.
        """
        self._listeners.append(listener)

        def remove() -> None:
            with contextlib.suppress(ValueError):
                self._listeners.remove(listener)

        return remove

    def _publish(self) -> None:
        for listener in list(self._listeners):
            try:
                listener()
            except Exception:
                _logger.exception("Update listener %r failed", listener)

    def _report(self, status: SyncStatus) -> None:
        if self._on_status is None:
            return
        icon, text = STATUS_DISPLAY[status]
        try:
            self._on_status(icon, text)
        except Exception:
            _logger.exception("Status sink failed for %s", status)

    # ------------------------------------------------------------------
    # Sync cycle
    # ------------------------------------------------------------------

    def _require_source(self) -> SheetSource:
        if self._source is None:
            raise TownSyncError("Controller not initialized. Use 'async with SyncController(...) as controller:'")
        return self._source

    async def sync(self, *, manual: bool = False) -> SyncResult | None:
        """Run one fetch/parse/compare/publish cycle.

        Returns ``None`` without doing anything if a cycle is already in
        flight. A manual cycle publishes even when the data is unchanged.
        Fetch failures are reported as an ``error`` result and leave the
        snapshot untouched; any other exception is recorded and re-raised.
        """
        source = self._require_source()
        state = self._state
        if state.is_updating:
            _logger.debug("Sync already in flight, ignoring %s trigger", "manual" if manual else "timer")
            return None

        state.is_updating = True
        state.last_status = SyncStatus.UPDATING
        if manual:
            self._report(SyncStatus.UPDATING)

        try:
            result = await self._run_cycle(source, manual=manual)
        except FetchError as exc:
            _logger.warning("Sheet fetch failed, keeping last known data: %s", exc)
            result = SyncResult(status=SyncStatus.ERROR, manual=manual, error=str(exc))
        except asyncio.CancelledError:
            state.last_status = SyncStatus.IDLE
            raise
        except Exception as exc:
            self._finish(SyncResult(status=SyncStatus.ERROR, manual=manual, error=repr(exc)))
            raise
        finally:
            state.is_updating = False

        self._finish(result)
        if result.published:
            self._publish()
        return result

    async def _run_cycle(self, source: SheetSource, *, manual: bool) -> SyncResult:
        state = self._state
        text = await source.fetch_text()
        batch = ingest_csv(text, self._config.columns, self._config.defaults)
        candidate = fingerprint(batch.records)

        if not manual and not has_changed(candidate, state.last_fingerprint):
            _logger.debug("Sheet unchanged (fingerprint %d)", candidate)
            return SyncResult(
                status=SyncStatus.UNCHANGED,
                manual=manual,
                fingerprint=candidate,
                record_count=batch.accepted,
                skipped=batch.skipped,
            )

        self._store.replace(batch.records)
        state.last_fingerprint = candidate
        _logger.info(
            "Town data updated: %d town(s), %d row(s) skipped",
            len(self._store),
            batch.skipped,
        )
        return SyncResult(
            status=SyncStatus.UPDATED,
            manual=manual,
            fingerprint=candidate,
            record_count=batch.accepted,
            skipped=batch.skipped,
            published=True,
        )

    def _finish(self, result: SyncResult) -> None:
        state = self._state
        state.last_status = result.status
        state.last_result = result
        state.cycles += 1
        if result.error is not None:
            state.last_error = result.error
        self._report(result.status)

    async def refresh(self) -> SyncResult | None:
        """Manual trigger: run a cycle now and always publish on success."""
        return await self.sync(manual=True)

    def request_refresh(self) -> asyncio.Task[SyncResult | None]:
        """Schedule a manual cycle without waiting for it (for UI handlers)."""
        return self._spawn(manual=True)

    # ------------------------------------------------------------------
    # Polling
    # ------------------------------------------------------------------

    async def _guarded_sync(self, *, manual: bool) -> SyncResult | None:
        try:
            return await self.sync(manual=manual)
        except asyncio.CancelledError:
            raise
        except Exception:
            _logger.exception("Sync cycle failed unexpectedly")
            return None

    def _spawn(self, *, manual: bool) -> asyncio.Task[SyncResult | None]:
        task = asyncio.create_task(self._guarded_sync(manual=manual), name="townsync-cycle")
        self._tick_tasks.add(task)
        task.add_done_callback(self._tick_tasks.discard)
        return task

    async def _poll_loop(self) -> None:
        interval = self._config.poll_interval
        while True:
            # Each tick runs as its own task so a hung fetch never stalls the timer.
            self._spawn(manual=False)
            await asyncio.sleep(interval)

    async def start(self) -> None:
        """Start polling: one cycle right away, then one every ``poll_interval`` seconds."""
        self._require_source()
        if self.is_running:
            _logger.debug("Polling already running")
            return
        self._report(SyncStatus.IDLE)
        self._poll_task = asyncio.create_task(self._poll_loop(), name="townsync-poll")
        _logger.debug("Polling %s every %.1fs", self._config.source_url, self._config.poll_interval)

    async def stop(self) -> None:
        """Stop polling and cancel any cycle still in flight."""
        tasks: list[asyncio.Task[Any]] = list(self._tick_tasks)
        if self._poll_task is not None:
            tasks.append(self._poll_task)
            self._poll_task = None
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
        self._tick_tasks.clear()
