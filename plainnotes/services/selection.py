from __future__ import annotations

import logging
from pathlib import Path

from PySide6.QtCore import QSettings

from plainnotes.core.entries import EntryKind, NoteFile, canonical_id
from plainnotes.settings import NOTE_EXTENSION, SettingsKeys, get_str, safe_set_setting
from plainnotes.vault.tree_store import TreeStore

log = logging.getLogger(__name__)


class SelectionMemory:
    """
    Remembers the last opened note across launches (QSettings nav/last_note).

    Only notes of this notes root count: a remembered path elsewhere, or a
    file without the note extension, is forgotten on restore.
    """

    def __init__(self, *, settings: QSettings, root: Path, extension: str = NOTE_EXTENSION):
        self._settings = settings
        self._root = Path(root)
        self._extension = extension

    @property
    def last_path(self) -> Path | None:
        raw = get_str(self._settings, SettingsKeys.LAST_NOTE, "").strip()
        return Path(raw) if raw else None

    def remember(self, path: Path) -> None:
        safe_set_setting(self._settings, SettingsKeys.LAST_NOTE, str(path))

    def forget(self) -> None:
        safe_set_setting(self._settings, SettingsKeys.LAST_NOTE, "")

    def restore(self, store: TreeStore) -> NoteFile | None:
        """Re-locate the remembered note in the current snapshot."""
        path = self.last_path
        if path is None or not store.is_loaded:
            return None
        entry = store.find(path)
        if entry is None and self._is_note_on_disk(path):
            # below the lazy depth cutoff: not materialized, but still there
            return NoteFile(path=path)
        if entry is None or entry.kind is not EntryKind.FILE:
            log.info("Last note no longer in tree, forgetting: %s", path)
            self.forget()
            return None
        return entry

    def _is_note_on_disk(self, path: Path) -> bool:
        if not path.name.endswith(self._extension) or path.name.startswith("."):
            return False
        try:
            Path(canonical_id(path)).relative_to(canonical_id(self._root))
        except ValueError:
            return False
        return path.is_file()
