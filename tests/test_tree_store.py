from pathlib import Path

from plainnotes.core.entries import Folder, NoteFile
from plainnotes.vault.tree_store import TreeStore


def test_starts_unloaded():
    store = TreeStore()
    assert not store.is_loaded
    assert store.snapshot is None
    assert store.version == 0
    assert store.generation == 0
    assert store.find("/anything") is None


def test_replace_swaps_whole_snapshot():
    store = TreeStore()
    first = Folder(path=Path("/n"), children=(NoteFile(path=Path("/n/a.md")),))
    second = Folder(path=Path("/n"), children=(NoteFile(path=Path("/n/b.md")),))

    assert store.replace(first)
    assert store.version == 1
    assert store.find("/n/a.md") is not None

    assert store.replace(second)
    assert store.version == 2
    assert store.snapshot is second
    assert store.find("/n/a.md") is None
    assert store.find(Path("/n/b.md")).name == "b.md"


def test_snapshot_from_before_mutation_is_refused():
    store = TreeStore()
    before = Folder(path=Path("/n"), children=(NoteFile(path=Path("/n/a.md")),))
    after = Folder(path=Path("/n"), children=(NoteFile(path=Path("/n/b.md")),))

    old_ticket = store.generation
    new_ticket = store.bump_generation()
    assert new_ticket == old_ticket + 1

    assert store.replace(after, ticket=new_ticket)
    assert not store.replace(before, ticket=old_ticket)
    assert store.snapshot is after
    assert store.version == 1


def test_same_generation_loads_still_apply():
    store = TreeStore()
    snapshot = Folder(path=Path("/n"))
    ticket = store.generation
    assert store.replace(snapshot, ticket=ticket)
    assert store.replace(snapshot, ticket=ticket)
    assert store.version == 2
