from __future__ import annotations

import enum
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterator, Union


class EntryKind(enum.Enum):
    FILE = "file"
    DIRECTORY = "directory"


def canonical_id(path: Path | str) -> str:
    """Identity of a node: the absolute, normalized path string."""
    return os.path.normpath(os.path.abspath(os.fspath(path)))


@dataclass(frozen=True)
class NoteFile:
    """A visible note. Superseded, never mutated, on rescan."""
    path: Path
    kind: EntryKind = field(default=EntryKind.FILE, init=False)

    @property
    def id(self) -> str:
        return canonical_id(self.path)

    @property
    def name(self) -> str:
        return self.path.name


@dataclass(frozen=True)
class Folder:
    """
    A directory node. children keep the scan's sort order.

    A Folder with no children below the depth cutoff is a placeholder:
    its real children come from DirectoryScanner.expand().
    """
    path: Path
    children: tuple[Entry, ...] = ()
    kind: EntryKind = field(default=EntryKind.DIRECTORY, init=False)

    @property
    def id(self) -> str:
        return canonical_id(self.path)

    @property
    def name(self) -> str:
        return self.path.name


Entry = Union[NoteFile, Folder]


def iter_entries(tree: Entry) -> Iterator[Entry]:
    """Depth-first, pre-order walk over a snapshot (the root included)."""
    stack: list[Entry] = [tree]
    while stack:
        entry = stack.pop()
        yield entry
        if entry.kind is EntryKind.DIRECTORY:
            stack.extend(reversed(entry.children))


def find_entry(identity: Path | str, tree: Entry | None) -> Entry | None:
    """Return the first entry whose identity matches, searching depth-first."""
    if tree is None:
        return None
    target = canonical_id(identity)
    for entry in iter_entries(tree):
        if entry.id == target:
            return entry
    return None


def count_entries(tree: Entry) -> tuple[int, int]:
    """(folders, files) in a snapshot; the root folder is not counted."""
    folders = files = 0
    for entry in iter_entries(tree):
        if entry is tree:
            continue
        if entry.kind is EntryKind.DIRECTORY:
            folders += 1
        else:
            files += 1
    return folders, files
