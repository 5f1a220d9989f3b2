# plainnotes/services/tree_service.py

from __future__ import annotations

import logging

from PySide6.QtCore import QObject, QThreadPool, Signal, Slot

from plainnotes.core.entries import Folder
from plainnotes.vault.repo import NoteRepository
from plainnotes.workers.tree_load import TreeLoadWorker

log = logging.getLogger(__name__)


class TreeService(QObject):
    """
    Single apply point for tree snapshots, plus background tree loads.

    Responsibilities:
    - install itself as the repository's publisher, so rescans after
      mutations made on worker threads are applied on this object's thread
    - manage req_id (drop stale loads) and start TreeLoadWorker
    - apply snapshots with their generation ticket; a load that started
      before the latest mutation is refused by the TreeStore
    - emit tree_changed for every applied snapshot
    """

    tree_changed = Signal(object)   # Folder
    load_failed = Signal(str)

    _snapshot_ready = Signal(object, int)   # snapshot, ticket

    def __init__(self, *, repo: NoteRepository, thread_pool: QThreadPool | None = None):
        super().__init__()
        self._repo = repo
        self._pool = thread_pool or QThreadPool.globalInstance()
        self._req_id = 0
        self._workers: dict[int, TreeLoadWorker] = {}

        # queued when emitted from a worker thread, direct on our own thread
        self._snapshot_ready.connect(self.apply_snapshot)
        repo.publish = self.publish

    # ───────────────────────── public API ─────────────────────────

    @property
    def latest_request(self) -> int:
        return self._req_id

    def publish(self, snapshot: Folder, ticket: int) -> None:
        """Hand a snapshot to the apply step; safe to call from any thread."""
        self._snapshot_ready.emit(snapshot, ticket)

    @Slot(object, int)
    def apply_snapshot(self, snapshot: Folder, ticket: int) -> bool:
        if not self._repo.store.replace(snapshot, ticket=ticket):
            log.debug("Dropping tree snapshot from before the latest mutation: ticket=%d", ticket)
            return False
        self.tree_changed.emit(snapshot)
        return True

    def request_load(self, *, concurrent: bool = True) -> int:
        self._req_id += 1
        req_id = self._req_id

        worker = TreeLoadWorker(
            req_id=req_id,
            repo=self._repo,
            ticket=self._repo.store.generation,
            concurrent=concurrent,
        )
        worker.signals.finished.connect(self._handle_finished)
        worker.signals.failed.connect(self._handle_failed)
        self._workers[req_id] = worker

        self._pool.start(worker)
        return req_id

    def load_now(self) -> Folder:
        """Synchronous load, for startup paths that must block."""
        self._req_id += 1
        return self._repo.load_tree()

    # ───────────────────────── internal ─────────────────────────

    @Slot(int, object)
    def _handle_finished(self, req_id: int, snapshot: Folder) -> None:
        worker = self._workers.pop(req_id, None)
        if req_id != self._req_id or worker is None:
            log.debug("Dropping stale tree load: req_id=%d latest=%d", req_id, self._req_id)
            return
        self.apply_snapshot(snapshot, worker.ticket)

    @Slot(int, str)
    def _handle_failed(self, req_id: int, err: str) -> None:
        self._workers.pop(req_id, None)
        if req_id != self._req_id:
            return
        log.warning("Tree load failed (bg): %s", err)
        self.load_failed.emit(err)
