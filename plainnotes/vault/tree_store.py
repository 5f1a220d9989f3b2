from __future__ import annotations

import threading
from pathlib import Path

from plainnotes.core.entries import Entry, Folder, find_entry


class TreeStore:
    """
    Holds the latest tree snapshot (None until the first scan).

    Snapshots are immutable; replace() swaps the whole tree. Entries found
    before a rescan are stale objects, so callers keep identity strings and
    re-locate them with find().

    generation counts filesystem mutations. A scan takes a ticket (the
    generation it started at) and replace() refuses a snapshot whose ticket
    is older than the latest mutation.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._snapshot: Folder | None = None
        self._version = 0
        self._generation = 0

    @property
    def snapshot(self) -> Folder | None:
        return self._snapshot

    @property
    def version(self) -> int:
        return self._version

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def is_loaded(self) -> bool:
        return self._snapshot is not None

    def bump_generation(self) -> int:
        """Record a finished mutation; returns the ticket for its rescan."""
        with self._lock:
            self._generation += 1
            return self._generation

    def replace(self, snapshot: Folder, *, ticket: int | None = None) -> bool:
        with self._lock:
            if ticket is not None and ticket < self._generation:
                return False
            self._snapshot = snapshot
            self._version += 1
            return True

    def find(self, identity: Path | str) -> Entry | None:
        return find_entry(identity, self._snapshot)
