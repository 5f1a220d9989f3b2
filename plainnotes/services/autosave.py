# plainnotes/services/autosave.py

from __future__ import annotations

import logging
from pathlib import Path

from PySide6.QtCore import QObject, QTimer, Signal, Slot

from plainnotes.infrastructure.filesystem import write_recovery_copy
from plainnotes.settings import AUTOSAVE_DEBOUNCE_MS
from plainnotes.vault.repo import NoteRepository

log = logging.getLogger(__name__)


class AutosaveService(QObject):
    """
    Debounced save of the note being edited.

    Each edit is bound to the note token current at edit time; a timer that
    fires after the editor switched notes skips the write instead of putting
    text into the wrong file. A failed write leaves a recovery copy.
    """

    saved = Signal(object)               # path
    recovery_written = Signal(object)    # recovery path

    def __init__(self, *, repo: NoteRepository, debounce_ms: int = AUTOSAVE_DEBOUNCE_MS):
        super().__init__()
        self._repo = repo
        self._note_token = 0
        self._pending: tuple[int, Path, str] | None = None

        self.save_timer = QTimer(self)
        self.save_timer.setSingleShot(True)
        self.save_timer.setInterval(int(debounce_ms))
        self.save_timer.timeout.connect(self._save_pending)

    def open_note(self) -> None:
        """Switch the editor to another note, flushing the previous one."""
        self.flush()
        self._note_token += 1

    def note_changed(self, path: Path, text: str) -> None:
        self._pending = (self._note_token, Path(path), text)
        self.save_timer.start()

    def retarget(self, old_path: Path, new_path: Path) -> None:
        """Follow a rename so a pending save lands in the moved file."""
        if self._pending is not None and self._pending[1] == Path(old_path):
            token, _, text = self._pending
            self._pending = (token, Path(new_path), text)

    def flush(self) -> bool:
        self.save_timer.stop()
        return self._save_pending()

    @Slot()
    def _save_pending(self) -> bool:
        pending = self._pending
        self._pending = None
        if pending is None:
            return False

        token, path, text = pending
        if token != self._note_token:
            log.info("Autosave skipped: note token mismatch (note switched before timer fired)")
            return False

        if self._repo.write(path, text):
            self.saved.emit(path)
            return True

        try:
            rec_path = write_recovery_copy(path, text)
        except OSError:
            log.exception("Failed to write recovery copy")
            return False
        log.critical("Recovery copy written: %s", rec_path)
        self.recovery_written.emit(rec_path)
        return False
