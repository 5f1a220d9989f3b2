# plainnotes/workers/tree_load.py

from __future__ import annotations

from PySide6.QtCore import QObject, QRunnable, Signal

from plainnotes.vault.repo import NoteRepository


class TreeLoadSignals(QObject):
    """
    finished(req_id, snapshot)
    failed(req_id, error_message)
    """
    finished = Signal(int, object)
    failed = Signal(int, str)


class TreeLoadWorker(QRunnable):
    """
    Scans the notes root off the UI thread.

    Only builds the snapshot. ticket is the store generation taken when
    the request was made; the owning service applies the snapshot with it.
    """

    def __init__(self, *, req_id: int, repo: NoteRepository, ticket: int, concurrent: bool = True):
        super().__init__()
        self.req_id = req_id
        self.ticket = ticket
        self.repo = repo
        self.concurrent = concurrent
        self.signals = TreeLoadSignals()

    def run(self) -> None:
        try:
            snapshot = self.repo.scan_tree(concurrent=self.concurrent)
            self.signals.finished.emit(self.req_id, snapshot)
        except Exception as exc:
            self.signals.failed.emit(self.req_id, str(exc))
