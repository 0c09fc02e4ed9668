"""
Autosave Scheduler

Two trailing debounce timers on the asyncio event loop:

- the buffer timer commits the edit buffer into the chapter list once the
  author has stopped typing for BUFFER_COMMIT_DELAY_MS;
- the save timer writes the whole chapter list to the manuscript record
  once the list has been quiet for REMOTE_SAVE_DELAY_MS.

Each timer is a single handle that every qualifying change cancels and
re-arms. A failed remote write is reported and forgotten: the next change
re-arms the save timer and tries again. Writes are not serialized, so with
overlapping requests the last response wins.
"""

import asyncio
from datetime import datetime, timezone
from typing import Any, Awaitable, Callable, Dict, List, Optional, Set, Tuple

from scribe.config import config
from scribe.utils.logging import autosave_logger
from scribe.utils.notifications import Notifier
from .document import DocumentEvent, DocumentStore


PersistFn = Callable[[List[Dict[str, Any]]], Awaitable[Any]]


class Debouncer:
    """
    Single-shot trailing timer.

    The callback arguments are captured when the timer is armed, not read
    when it fires. Must be armed from the event loop thread.
    """

    def __init__(self, delay: float):
        self.delay = delay
        self._handle: Optional[asyncio.TimerHandle] = None
        self._callback: Optional[Callable[..., Any]] = None
        self._args: Tuple[Any, ...] = ()

    @property
    def pending(self) -> bool:
        return self._handle is not None

    @property
    def args(self) -> Optional[Tuple[Any, ...]]:
        """Arguments of the pending call, or None when idle."""
        return self._args if self.pending else None

    def arm(self, callback: Callable[..., Any], *args: Any) -> None:
        self.cancel()
        loop = asyncio.get_running_loop()
        self._callback = callback
        self._args = args
        self._handle = loop.call_later(self.delay, self._fire)

    def flush(self) -> bool:
        """Run the pending call now. Returns False when nothing was pending."""
        if self._handle is None:
            return False
        self._handle.cancel()
        self._fire()
        return True

    def cancel(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
        self._handle = None
        self._callback = None
        self._args = ()

    def _fire(self) -> None:
        callback, args = self._callback, self._args
        self._handle = None
        self._callback = None
        self._args = ()
        if callback is not None:
            callback(*args)


class AutosaveScheduler:
    """
    Keeps a DocumentStore's chapter list committed and persisted.

    Usage:
        scheduler = AutosaveScheduler(store, persist=save_chapters)
        store.update_buffer(html)   # committed after the buffer delay,
                                    # saved after the save delay
        await scheduler.aclose()
    """

    def __init__(
        self,
        store: DocumentStore,
        persist: PersistFn,
        *,
        buffer_delay: Optional[float] = None,
        save_delay: Optional[float] = None,
        notifier: Optional[Notifier] = None,
        manuscript_id: Optional[str] = None,
    ):
        self.store = store
        self.manuscript_id = manuscript_id
        self._persist = persist
        self._notifier = notifier
        self._buffer_timer = Debouncer(
            config.buffer_commit_delay if buffer_delay is None else buffer_delay
        )
        self._save_timer = Debouncer(
            config.remote_save_delay if save_delay is None else save_delay
        )
        self._in_flight: Set[asyncio.Task] = set()

        self.save_count = 0
        self.failure_count = 0
        self.last_saved_at: Optional[datetime] = None

        store.subscribe(self._on_document_event)

    # =========================================================================
    # State
    # =========================================================================

    @property
    def pending_commit(self) -> Optional[Tuple[str, str]]:
        """(chapter_id, content) waiting to be committed, if any."""
        args = self._buffer_timer.args
        return (args[0], args[1]) if args else None

    @property
    def save_pending(self) -> bool:
        return self._save_timer.pending

    @property
    def saving(self) -> bool:
        return bool(self._in_flight)

    # =========================================================================
    # Document events
    # =========================================================================

    def _on_document_event(self, event: DocumentEvent) -> None:
        if event == DocumentEvent.BUFFER_CHANGED:
            self._arm_buffer_commit()
        elif event == DocumentEvent.CHAPTERS_CHANGED:
            self._save_timer.arm(self._start_save)
        elif event == DocumentEvent.CHAPTER_SELECTED:
            self._on_chapter_selected()
        elif event == DocumentEvent.CHAPTERS_REPLACED:
            # Pending edits belonged to the chapter list that was just replaced
            self._buffer_timer.cancel()
            self._save_timer.arm(self._start_save)

    def _arm_buffer_commit(self) -> None:
        chapter_id = self.store.active_chapter_id
        content = self.store.buffer
        pending = self.pending_commit
        if pending and pending[0] != chapter_id:
            # An edit of another chapter is still waiting; it keeps its chapter
            self._buffer_timer.flush()
        self._buffer_timer.arm(self._commit_buffer, chapter_id, content)

    def _on_chapter_selected(self) -> None:
        pending = self.pending_commit
        if pending and pending[0] == self.store.active_chapter_id:
            # Back on a chapter whose edit is not committed yet: the list
            # holds stale content, so commit now and show the edit
            self._buffer_timer.flush()
            self.store.buffer = pending[1]

    def _commit_buffer(self, chapter_id: str, content: str) -> None:
        if not self.store.commit_content(chapter_id, content):
            autosave_logger.warning(
                "Dropped edit for missing chapter",
                manuscript_id=self.manuscript_id,
                chapter_id=chapter_id,
            )

    # =========================================================================
    # Remote persistence
    # =========================================================================

    def _start_save(self) -> None:
        records = self.store.chapter_records()
        task = asyncio.get_running_loop().create_task(self._save(records))
        self._in_flight.add(task)
        task.add_done_callback(self._in_flight.discard)

    async def _save(self, records: List[Dict[str, Any]]) -> bool:
        try:
            await self._persist(records)
        except Exception as e:
            self.failure_count += 1
            autosave_logger.error(
                "Autosave failed",
                manuscript_id=self.manuscript_id,
                error=str(e),
                chapters=len(records),
            )
            if self._notifier is not None:
                self._notifier.error("Failed to save", str(e))
            return False

        self.save_count += 1
        self.last_saved_at = datetime.now(timezone.utc)
        autosave_logger.debug("Manuscript saved", manuscript_id=self.manuscript_id, chapters=len(records))
        return True

    # =========================================================================
    # Explicit control
    # =========================================================================

    def flush(self) -> bool:
        """Commit a pending buffer edit into the chapter list immediately."""
        return self._buffer_timer.flush()

    async def save_now(self) -> bool:
        """Commit the buffer and write the chapter list without waiting."""
        self.flush()
        self._save_timer.cancel()
        return await self._save(self.store.chapter_records())

    async def wait_idle(self) -> None:
        """Wait for in-flight remote writes to finish."""
        while self._in_flight:
            await asyncio.gather(*list(self._in_flight), return_exceptions=True)

    async def aclose(self, flush: bool = True) -> None:
        """
        Stop both timers and wait for in-flight writes.

        With flush, a pending edit or save is written first instead of
        being dropped.
        """
        had_changes = self._buffer_timer.pending or self._save_timer.pending
        if flush:
            self.flush()
        else:
            self._buffer_timer.cancel()
        self._save_timer.cancel()
        if flush and had_changes:
            await self._save(self.store.chapter_records())
        await self.wait_idle()
