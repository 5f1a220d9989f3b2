# plainnotes/workers/move_note.py

from __future__ import annotations

from pathlib import Path

from PySide6.QtCore import QObject, QRunnable, Signal

from plainnotes.vault.repo import NoteRepository


class MoveNoteSignals(QObject):
    """
    finished(req_id, source, new_path_or_None)
    failed(req_id, error_message)
    """
    finished = Signal(int, object, object)
    failed = Signal(int, str)


class MoveNoteWorker(QRunnable):
    """
    Runs NoteRepository.move() in the thread pool.

    IMPORTANT:
    - No UI code
    - Once started, the move runs to completion
    """

    def __init__(self, *, req_id: int, repo: NoteRepository, source: Path, destination: str):
        super().__init__()
        self.req_id = req_id
        self.repo = repo
        self.source = Path(source)
        self.destination = destination
        self.signals = MoveNoteSignals()

    def run(self) -> None:
        try:
            new_path = self.repo.move(self.source, self.destination)
            self.signals.finished.emit(self.req_id, self.source, new_path)
        except Exception as exc:
            self.signals.failed.emit(self.req_id, str(exc))
