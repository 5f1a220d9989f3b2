# plainnotes/services/rename_service.py

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from pathlib import Path

from PySide6.QtCore import QObject, QThreadPool, QTimer, Signal, Slot

from plainnotes.core.entries import canonical_id
from plainnotes.settings import RENAME_DEBOUNCE_MS
from plainnotes.vault.repo import NoteRepository
from plainnotes.workers.move_note import MoveNoteWorker

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class _RenameRequest:
    generation: int
    source: Path
    destination: str


class RenameService(QObject):
    """
    Debounced move/rename driven by a path field that changes on every keystroke.

    Responsibilities:
    - restart the quiet-period timer on each schedule() (cancel-on-reschedule)
    - keep at most one move in flight; a request arriving meanwhile waits
      and is re-based onto the note's new path when the running move ends
    - report the outcome: moved(source, new_path) or move_failed(source, destination)

    All methods must be called from the thread that owns the service.
    """

    moved = Signal(object, object)        # source, new_path
    move_failed = Signal(object, str)     # source, destination

    def __init__(
        self,
        *,
        repo: NoteRepository,
        thread_pool: QThreadPool | None = None,
        debounce_ms: int = RENAME_DEBOUNCE_MS,
    ):
        super().__init__()

        self._repo = repo
        self._pool = thread_pool or QThreadPool.globalInstance()

        self._req_id = 0
        self._generation = 0
        self._pending: _RenameRequest | None = None
        self._in_flight: _RenameRequest | None = None
        self._worker: MoveNoteWorker | None = None

        self._debounce_timer = QTimer(self)
        self._debounce_timer.setSingleShot(True)
        self._debounce_timer.setInterval(int(debounce_ms))
        self._debounce_timer.timeout.connect(self._fire)

    # ───────────────────────── public API ─────────────────────────

    @property
    def has_pending(self) -> bool:
        return self._pending is not None

    @property
    def is_busy(self) -> bool:
        return self._in_flight is not None

    def schedule(self, source: Path, destination: str) -> None:
        """Replace any pending rename and restart the quiet period."""
        self._generation += 1
        self._pending = _RenameRequest(self._generation, Path(source), destination)
        self._debounce_timer.start()

    def commit(self) -> None:
        """Run the pending rename now (e.g. the user pressed Enter)."""
        self._debounce_timer.stop()
        self._fire()

    def cancel(self) -> None:
        """Drop the pending rename. A move already running is not interrupted."""
        self._debounce_timer.stop()
        if self._pending is not None:
            log.debug("Rename cancelled: %s -> %r", self._pending.source, self._pending.destination)
        self._pending = None

    # ───────────────────────── internal ─────────────────────────

    @Slot()
    def _fire(self) -> None:
        if self._pending is None:
            return
        if self._in_flight is not None:
            # picked up again in _handle_finished
            return

        request = self._pending
        self._pending = None
        self._in_flight = request

        self._req_id += 1
        worker = MoveNoteWorker(
            req_id=self._req_id,
            repo=self._repo,
            source=request.source,
            destination=request.destination,
        )
        worker.signals.finished.connect(self._handle_finished)
        worker.signals.failed.connect(self._handle_failed)
        self._worker = worker

        log.debug("Rename started: %s -> %r (gen=%d)", request.source, request.destination, request.generation)
        self._pool.start(worker)

    @Slot(int, object, object)
    def _handle_finished(self, req_id: int, source: Path, new_path: Path | None) -> None:
        if req_id != self._req_id:
            return
        request = self._in_flight
        self._release()

        if new_path is None:
            self.move_failed.emit(source, request.destination if request else "")
        else:
            self._rebase_pending(source, Path(new_path))
            self.moved.emit(source, new_path)
        self._resume_pending()

    @Slot(int, str)
    def _handle_failed(self, req_id: int, err: str) -> None:
        if req_id != self._req_id:
            return
        request = self._in_flight
        self._release()
        log.warning("Rename failed (bg): %s", err)
        if request is not None:
            self.move_failed.emit(request.source, request.destination)
        self._resume_pending()

    def _release(self) -> None:
        self._in_flight = None
        self._worker = None

    def _rebase_pending(self, source: Path, new_path: Path) -> None:
        pending = self._pending
        if pending is not None and canonical_id(pending.source) == canonical_id(source):
            self._pending = replace(pending, source=new_path)

    def _resume_pending(self) -> None:
        if self._pending is not None and not self._debounce_timer.isActive():
            self._fire()
