# plainnotes/infrastructure/filesystem.py

from __future__ import annotations

import os
import uuid
from datetime import datetime
from pathlib import Path

from plainnotes.settings import NOTE_EXTENSION, RECOVERY_DIR


def atomic_write_text(
    path: Path,
    text: str,
    *,
    encoding: str = "utf-8",
) -> None:
    """
    Atomic-ish file write:
    - write to a hidden temp file in the same directory
    - fsync
    - replace()

    The temp name starts with "." so a concurrent scan never shows it.
    Raises OSError on failure; the temp file is removed either way.
    """
    path = Path(path)
    parent = path.parent

    tmp_path = parent / f".{path.name}.tmp-{uuid.uuid4().hex}"

    f = None
    try:
        f = open(tmp_path, "w", encoding=encoding, newline="")
        f.write(text)
        f.flush()
        os.fsync(f.fileno())
        f.close()
        f = None

        tmp_path.replace(path)

    finally:
        try:
            if f is not None:
                f.close()
        except OSError:
            pass

        try:
            if tmp_path.exists():
                tmp_path.unlink()
        except OSError:
            pass


def write_recovery_copy(note_path: Path, text: str, *, recovery_dir: Path = RECOVERY_DIR) -> Path:
    """
    Emergency save when the normal save fails.

    Writes a timestamped copy into ~/.plainnotes/recovery/ and returns its path.
    """
    note_path = Path(note_path)
    recovery_dir.mkdir(parents=True, exist_ok=True)

    stem = note_path.stem or "Untitled"
    ts = datetime.now().strftime("%Y%m%d-%H%M%S")

    recovery_path = recovery_dir / f"{stem}.recovery.{ts}{NOTE_EXTENSION}"
    atomic_write_text(recovery_path, text, encoding="utf-8")

    return recovery_path
