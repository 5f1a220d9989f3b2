from __future__ import annotations

import logging
import os
import shutil
from pathlib import Path
from typing import Callable

from plainnotes.core.entries import Folder, canonical_id
from plainnotes.core.paths import EmptyPathError, resolve_destination, with_note_extension
from plainnotes.infrastructure.filesystem import atomic_write_text
from plainnotes.settings import NOTE_EXTENSION, WELCOME_NOTE_NAME
from plainnotes.vault.scanner import DirectoryScanner
from plainnotes.vault.tree_store import TreeStore

log = logging.getLogger(__name__)


def _welcome_text(root: Path) -> str:
    return (
        "# Welcome to Notes!\n\n"
        "This is your personal note-taking space. All your notes are stored locally in:\n\n"
        f"`{root}`\n\n"
        "## Features\n\n"
        "- Create folders to organize your notes\n"
        "- Use the path field at the top to rename/move notes (e.g. `work/ideas/today`)\n"
        "- All files are stored locally as markdown\n\n"
        "**Start writing!**\n"
    )


class NoteRepository:
    """
    The only writer of the notes directory.

    Every structural change (create, create_directory, delete, move) ends
    with a rescan whose snapshot goes to the TreeStore. Nothing here raises
    for I/O problems: failures come back as "", False or None.

    publish(snapshot, ticket) is the apply step. Without one the snapshot is
    applied on the calling thread; TreeService installs itself here so
    snapshots built on worker threads are applied on its own thread.
    """

    def __init__(
        self,
        root: Path,
        *,
        scanner: DirectoryScanner | None = None,
        store: TreeStore | None = None,
        extension: str = NOTE_EXTENSION,
        publish: Callable[[Folder, int], None] | None = None,
    ):
        self.root = Path(root)
        self.extension = extension
        self.scanner = scanner or DirectoryScanner(extension=extension)
        self.store = store or TreeStore()
        self.publish = publish

    # ───────────────────────── tree ─────────────────────────

    def ensure_root(self) -> bool:
        """Create the root with a welcome note on first run. Returns True if created."""
        if self.root.exists():
            return False
        try:
            self.root.mkdir(parents=True, exist_ok=True)
            atomic_write_text(self.note_path(WELCOME_NOTE_NAME), _welcome_text(self.root))
        except OSError:
            log.exception("Failed to initialize notes root: %s", self.root)
            return False
        log.info("Notes root created: %s", self.root)
        return True

    def scan_tree(self, *, concurrent: bool = True) -> Folder:
        """Build a fresh snapshot without publishing it."""
        if concurrent:
            return self.scanner.scan_concurrent(self.root)
        return self.scanner.scan(self.root)

    def load_tree(self, *, concurrent: bool = True) -> Folder:
        ticket = self.store.generation
        snapshot = self.scan_tree(concurrent=concurrent)
        self._apply(snapshot, ticket)
        return snapshot

    def rescan(self) -> Folder:
        """Rescan after a mutation; older in-flight scans can no longer be applied."""
        ticket = self.store.bump_generation()
        snapshot = self.scanner.scan(self.root)
        self._apply(snapshot, ticket)
        return snapshot

    def _apply(self, snapshot: Folder, ticket: int) -> None:
        if self.publish is not None:
            self.publish(snapshot, ticket)
        else:
            self.store.replace(snapshot, ticket=ticket)

    def expand(self, path: Path) -> Folder:
        return self.scanner.expand(Path(path))

    def note_path(self, name: str, in_directory: Path | None = None) -> Path:
        directory = self.root if in_directory is None else Path(in_directory)
        return directory / with_note_extension(name, self.extension)

    # ───────────────────────── content ─────────────────────────

    def read(self, path: Path) -> str:
        try:
            return Path(path).read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            log.debug("Read fell back to empty text: %s (%s)", path, exc)
            return ""

    def write(self, path: Path, text: str) -> bool:
        try:
            atomic_write_text(Path(path), text, encoding="utf-8")
            return True
        except OSError:
            log.warning("Write failed: %s", path, exc_info=True)
            return False

    # ───────────────────────── structure ─────────────────────────

    def create(self, name: str, in_directory: Path, with_template: bool = True) -> Path | None:
        path = self.note_path(name, in_directory)
        if path.exists():
            log.info("Create skipped, note exists: %s", path)
            return None

        text = f"# {path.name[: -len(self.extension)]}\n\n" if with_template else ""
        try:
            atomic_write_text(path, text, encoding="utf-8")
        except OSError:
            log.warning("Create failed: %s", path, exc_info=True)
            return None

        log.info("Note created: %s", path)
        self.rescan()
        return path

    def create_directory(self, name: str, in_directory: Path) -> Path | None:
        path = Path(in_directory) / name
        if path.exists():
            log.info("Create folder skipped, exists: %s", path)
            return None
        try:
            path.mkdir(parents=True, exist_ok=True)
        except OSError:
            log.warning("Create folder failed: %s", path, exc_info=True)
            return None

        log.info("Folder created: %s", path)
        self.rescan()
        return path

    def delete(self, path: Path) -> None:
        path = Path(path)
        try:
            if path.is_dir() and not path.is_symlink():
                shutil.rmtree(path)
            else:
                path.unlink()
            log.info("Deleted: %s", path)
        except OSError as exc:
            log.debug("Delete ignored error for %s: %s", path, exc)
        self.rescan()

    def move(self, source: Path, destination: str) -> Path | None:
        """
        Move/rename a note to a root-relative slash path ("work/ideas/today").

        Missing directories along the way are created. An existing,
        different destination wins: the source is deleted and the
        destination returned. Returns None when nothing could be moved.
        """
        source = Path(source)
        try:
            resolved = resolve_destination(destination, self.root)
        except EmptyPathError:
            log.info("Move rejected, empty destination: %r", destination)
            return None

        current = self.root
        for name in resolved.directories:
            current = current / name
            if current.exists():
                continue
            try:
                current.mkdir(parents=True, exist_ok=True)
            except OSError:
                log.warning("Move failed creating folder: %s", current, exc_info=True)
                return None

        target = resolved.file_path(self.extension)

        if canonical_id(target) == canonical_id(source):
            return source

        if target.exists() and not _same_file(source, target):
            log.warning("Move destination exists, dropping source: %s -> %s", source, target)
            try:
                source.unlink()
            except OSError as exc:
                log.warning("Could not delete moved source %s: %s", source, exc)
            self.rescan()
            return target

        try:
            source.replace(target)
        except OSError:
            log.warning("Move failed: %s -> %s", source, target, exc_info=True)
            return None

        log.info("Moved: %s -> %s", source, target)
        self.rescan()
        return target


def _same_file(a: Path, b: Path) -> bool:
    """True for two spellings of one file (case-insensitive filesystems)."""
    try:
        return os.path.samefile(a, b)
    except OSError:
        return False
