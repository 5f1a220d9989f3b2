from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from PySide6.QtCore import QSettings, QStandardPaths

APP_NAME = "plainnotes"
LOG_DIR = Path.home() / f".{APP_NAME}" / "logs"
LOG_PATH = LOG_DIR / f"{APP_NAME}.log"
RECOVERY_DIR = Path.home() / f".{APP_NAME}" / "recovery"

NOTE_EXTENSION = ".md"
NOTES_DIR_NAME = "Notes"
WELCOME_NOTE_NAME = "Welcome"

DEFAULT_MAX_DEPTH = 2
SCAN_MAX_WORKERS = 8

RENAME_DEBOUNCE_MS = 500
AUTOSAVE_DEBOUNCE_MS = 600


@dataclass(frozen=True)
class SettingsKeys:
    NOTES_ROOT: str = "vault/root"
    MAX_DEPTH: str = "scan/max_depth"
    LAST_NOTE: str = "nav/last_note"


@dataclass(frozen=True)
class NotesConfig:
    root: Path
    max_depth: int = DEFAULT_MAX_DEPTH
    extension: str = NOTE_EXTENSION


def get_str(settings: QSettings, key: str, default: str) -> str:
    try:
        val = settings.value(key, default)
        return str(val) if val is not None else default
    except Exception:
        return default


def get_int(settings: QSettings, key: str, default: int) -> int:
    try:
        return int(settings.value(key, default))
    except Exception:
        return default


def safe_set_setting(settings: QSettings, key: str, value) -> None:
    """Best-effort write into QSettings, never raises."""
    try:
        settings.setValue(key, value)
    except Exception:
        pass


def default_notes_root() -> Path:
    documents = QStandardPaths.writableLocation(QStandardPaths.DocumentsLocation)
    base = Path(documents) if documents else Path.home() / "Documents"
    return base / NOTES_DIR_NAME


def load_config(settings: QSettings) -> NotesConfig:
    """
    Read the notes configuration from QSettings.

    An empty or missing root falls back to <Documents>/Notes; a negative
    depth is clamped to 0 (every top-level folder becomes a placeholder).
    """
    root_raw = get_str(settings, SettingsKeys.NOTES_ROOT, "").strip()
    root = Path(root_raw).expanduser() if root_raw else default_notes_root()
    max_depth = max(0, get_int(settings, SettingsKeys.MAX_DEPTH, DEFAULT_MAX_DEPTH))
    return NotesConfig(root=root, max_depth=max_depth)
