# plainnotes/vault/scanner.py

from __future__ import annotations

import logging
import os
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from pathlib import Path

from plainnotes.core.entries import Entry, Folder, NoteFile, count_entries
from plainnotes.core.ordering import natural_key
from plainnotes.settings import DEFAULT_MAX_DEPTH, NOTE_EXTENSION, SCAN_MAX_WORKERS

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class _Listed:
    name: str
    path: Path
    is_dir: bool


@dataclass(frozen=True)
class DirectoryScanner:
    """
    Builds immutable Folder snapshots of a notes directory.

    Depth counts from the scanned directory (depth 0). Subdirectories met
    while depth < max_depth are scanned fully; at depth == max_depth they
    become childless placeholders, kept only when has_content() says so.
    Directories without a note anywhere below them are pruned.

    Never raises for I/O problems: an unreadable directory has no children.
    """
    extension: str = NOTE_EXTENSION
    max_depth: int = DEFAULT_MAX_DEPTH
    max_workers: int = SCAN_MAX_WORKERS

    # ───────────────────────── public API ─────────────────────────

    def scan(self, root: Path, max_depth: int | None = None) -> Folder:
        root = Path(root)
        depth_limit = self._depth_limit(max_depth)
        t0 = time.perf_counter()
        folder = self._scan_dir(root, 0, depth_limit)
        self._log_scan("sequential", folder, t0)
        return folder

    def scan_concurrent(self, root: Path, max_depth: int | None = None) -> Folder:
        """
        Same snapshot as scan(); top-level subdirectories are scanned in parallel.
        """
        root = Path(root)
        depth_limit = self._depth_limit(max_depth)
        t0 = time.perf_counter()

        listed = self._list_dir(root)
        subdirs = [item.path for item in listed if item.is_dir]
        if len(subdirs) <= 1:
            folder = self._assemble(root, listed, 0, depth_limit, {})
        else:
            folder = self._assemble(root, listed, 0, depth_limit, self._scan_parallel(subdirs, depth_limit))
        self._log_scan("concurrent", folder, t0)
        return folder

    def expand(self, path: Path, max_depth: int = 0) -> Folder:
        """
        On-demand load of a placeholder folder.

        With max_depth=0 its subdirectories come back as placeholders again.
        """
        return self._scan_dir(Path(path), 0, max(0, max_depth))

    def has_content(self, path: Path) -> bool:
        """True if a note exists anywhere below path (hidden entries ignored)."""
        listed = self._list_dir(Path(path))
        if any(not item.is_dir for item in listed):
            return True
        return any(self.has_content(item.path) for item in listed if item.is_dir)

    # ───────────────────────── internal ─────────────────────────

    def _depth_limit(self, max_depth: int | None) -> int:
        return max(0, self.max_depth if max_depth is None else max_depth)

    def _list_dir(self, directory: Path) -> list[_Listed]:
        """
        Visible children of directory in display order.

        Only note files and subdirectories are returned; hidden names and
        other files are dropped here.
        """
        items: list[_Listed] = []
        try:
            with os.scandir(directory) as it:
                for child in it:
                    name = child.name
                    if name.startswith("."):
                        continue
                    try:
                        is_dir = child.is_dir()
                    except OSError:
                        continue
                    if not is_dir and not name.endswith(self.extension):
                        continue
                    items.append(_Listed(name=name, path=directory / name, is_dir=is_dir))
        except OSError as exc:
            log.debug("Cannot list %s: %s", directory, exc)
            return []
        items.sort(key=lambda item: natural_key(item.name))
        return items

    def _scan_dir(self, directory: Path, depth: int, max_depth: int) -> Folder:
        return self._assemble(directory, self._list_dir(directory), depth, max_depth, {})

    def _scan_subdir(self, path: Path, depth: int, max_depth: int) -> Folder | None:
        """Folder for a subdirectory met at `depth`, or None when it is pruned."""
        if depth < max_depth:
            sub = self._scan_dir(path, depth + 1, max_depth)
            return sub if sub.children else None
        if self.has_content(path):
            return Folder(path=path)
        return None

    def _scan_parallel(self, subdirs: list[Path], max_depth: int) -> dict[Path, Folder | None]:
        results: dict[Path, Folder | None] = {}
        workers = max(1, min(self.max_workers, len(subdirs)))
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="plainnotes-scan") as executor:
            futures = {
                path: executor.submit(self._scan_subdir, path, 0, max_depth)
                for path in subdirs
            }
            for path, future in futures.items():
                try:
                    results[path] = future.result()
                except Exception:
                    log.exception("Parallel scan failed for %s; retrying sequentially", path)
                    results[path] = self._scan_subdir(path, 0, max_depth)
        return results

    def _assemble(
        self,
        directory: Path,
        listed: list[_Listed],
        depth: int,
        max_depth: int,
        prescanned: dict[Path, Folder | None],
    ) -> Folder:
        children: list[Entry] = []
        for item in listed:
            if not item.is_dir:
                children.append(NoteFile(path=item.path))
                continue
            if item.path in prescanned:
                sub = prescanned[item.path]
            else:
                sub = self._scan_subdir(item.path, depth, max_depth)
            if sub is not None:
                children.append(sub)
        return Folder(path=directory, children=tuple(children))

    def _log_scan(self, mode: str, folder: Folder, t0: float) -> None:
        if not log.isEnabledFor(logging.DEBUG):
            return
        folders, files = count_entries(folder)
        log.debug(
            "Scan (%s) of %s: folders=%d files=%d time_ms=%.1f",
            mode, folder.path, folders, files, (time.perf_counter() - t0) * 1000.0,
        )
