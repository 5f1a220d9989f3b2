import os

import pytest

from conftest import make_tree, names
from plainnotes.core.entries import EntryKind, find_entry
from plainnotes.vault.repo import NoteRepository
from plainnotes.vault.scanner import DirectoryScanner
from plainnotes.vault.tree_store import TreeStore


@pytest.fixture
def root(tmp_path):
    r = tmp_path / "Notes"
    r.mkdir()
    return r


@pytest.fixture
def repo(root):
    r = NoteRepository(root, scanner=DirectoryScanner(max_depth=2), store=TreeStore())
    r.load_tree()
    return r


def _listing(root):
    return sorted(
        os.path.relpath(os.path.join(dirpath, name), root)
        for dirpath, dirnames, filenames in os.walk(root)
        for name in dirnames + filenames
    )


# ───────────────────────── bootstrap ─────────────────────────

def test_ensure_root_seeds_welcome(tmp_path):
    repo = NoteRepository(tmp_path / "Docs" / "Notes")
    assert repo.ensure_root()
    welcome = tmp_path / "Docs" / "Notes" / "Welcome.md"
    assert welcome.read_text(encoding="utf-8").startswith("# Welcome")
    assert not repo.ensure_root()


def test_load_tree_replaces_store(repo, root):
    make_tree(root, {"a.md": ""})
    before = repo.store.version
    snapshot = repo.load_tree(concurrent=True)
    assert repo.store.snapshot is snapshot
    assert repo.store.version == before + 1
    assert names(snapshot) == ["a.md"]


# ───────────────────────── read / write ─────────────────────────

def test_read_missing_returns_empty(repo, root):
    assert repo.read(root / "nope.md") == ""


def test_read_directory_returns_empty(repo, root):
    assert repo.read(root) == ""


def test_read_invalid_utf8_returns_empty(repo, root):
    (root / "bad.md").write_bytes(b"\xff\xfe\xfa")
    assert repo.read(root / "bad.md") == ""


def test_write_then_read(repo, root):
    path = root / "n.md"
    assert repo.write(path, "héllo\n")
    assert repo.read(path) == "héllo\n"
    assert [p.name for p in root.iterdir()] == ["n.md"]


def test_write_failure_is_swallowed(repo, root):
    assert repo.write(root / "missing-dir" / "n.md", "x") is False


# ───────────────────────── create / delete ─────────────────────────

def test_create_with_template(repo, root):
    path = repo.create("Meeting", root)
    assert path == root / "Meeting.md"
    assert path.read_text(encoding="utf-8") == "# Meeting\n\n"
    assert repo.store.find(path) is not None


def test_create_without_template(repo, root):
    path = repo.create("blank.md", root, with_template=False)
    assert path == root / "blank.md"
    assert path.read_text(encoding="utf-8") == ""


def test_create_existing_returns_none(repo, root):
    make_tree(root, {"a.md": "keep"})
    assert repo.create("a", root) is None
    assert (root / "a.md").read_text(encoding="utf-8") == "keep"


def test_create_directory(repo, root):
    path = repo.create_directory("Projects", root)
    assert path == root / "Projects"
    assert path.is_dir()
    # empty folders are pruned from the tree
    assert repo.store.find(path) is None
    assert repo.create_directory("Projects", root) is None


def test_delete_file_and_folder(repo, root):
    make_tree(root, {"a.md": "", "dir/b.md": "", "dir/sub/c.md": ""})
    repo.load_tree()
    repo.delete(root / "a.md")
    repo.delete(root / "dir")
    assert _listing(root) == []
    assert repo.store.snapshot.children == ()


def test_delete_missing_is_ignored(repo, root):
    before = repo.store.version
    repo.delete(root / "gone.md")
    assert repo.store.version == before + 1


# ───────────────────────── move ─────────────────────────

def test_move_rename_in_place(repo, root):
    make_tree(root, {"a.md": "A"})
    new_path = repo.move(root / "a.md", "b")
    assert new_path == root / "b.md"
    assert not (root / "a.md").exists()
    assert new_path.read_text(encoding="utf-8") == "A"
    assert repo.store.find(new_path).kind is EntryKind.FILE
    assert repo.store.find(root / "a.md") is None


def test_move_creates_intermediate_directories(repo, root):
    make_tree(root, {"a.md": "A"})
    new_path = repo.move(root / "a.md", "x/y/z")
    assert new_path == root / "x" / "y" / "z.md"
    assert (root / "x").is_dir()
    assert (root / "x" / "y").is_dir()
    assert new_path.read_text(encoding="utf-8") == "A"
    assert not (root / "a.md").exists()


def test_move_same_location_is_noop(repo, root):
    make_tree(root, {"sub/a.md": "A"})
    repo.load_tree()
    source = root / "sub" / "a.md"
    version = repo.store.version
    listing = _listing(root)

    assert repo.move(source, "sub/a") is source
    assert repo.move(source, "/sub//a.md/") is source
    assert repo.store.version == version
    assert _listing(root) == listing


def test_move_onto_existing_keeps_destination(repo, root):
    make_tree(root, {"a.md": "from a", "b.md": "from b"})
    new_path = repo.move(root / "a.md", "b")
    assert new_path == root / "b.md"
    assert not (root / "a.md").exists()
    assert (root / "b.md").read_text(encoding="utf-8") == "from b"
    assert names(repo.store.snapshot) == ["b.md"]


def test_move_empty_destination(repo, root):
    make_tree(root, {"a.md": "A"})
    assert repo.move(root / "a.md", "///") is None
    assert repo.move(root / "a.md", "") is None


def test_move_missing_source_fails_and_keeps_tree(repo, root):
    make_tree(root, {"b.md": "B"})
    assert repo.move(root / "gone.md", "c") is None
    assert (root / "b.md").read_text(encoding="utf-8") == "B"
    assert not (root / "c.md").exists()


def test_move_blocked_by_file_in_directory_position(repo, root):
    make_tree(root, {"a.md": "A", "x": "plain file"})
    assert repo.move(root / "a.md", "x/y") is None
    assert (root / "a.md").read_text(encoding="utf-8") == "A"


def test_move_leaves_emptied_folder_on_disk(repo, root):
    make_tree(root, {"old/a.md": "A"})
    repo.load_tree()
    repo.move(root / "old" / "a.md", "a")
    assert (root / "old").is_dir()
    assert names(repo.store.snapshot) == ["a.md"]


def test_find_after_rescan_for_unaffected_file(repo, root):
    make_tree(root, {"keep/k.md": "K", "a.md": "A"})
    repo.load_tree()
    before = repo.store.find(root / "keep" / "k.md")
    old_snapshot = repo.store.snapshot

    repo.move(root / "a.md", "moved/a")

    after = repo.store.find(before.id)
    assert repo.store.snapshot is not old_snapshot
    assert after is not None
    assert after.id == before.id
    assert after == before


def test_expand_delegates_to_scanner(tmp_path):
    root = tmp_path / "Notes"
    make_tree(root, {"a/b/c.md": ""})
    repo = NoteRepository(root, scanner=DirectoryScanner(max_depth=0))
    snapshot = repo.load_tree()
    placeholder = find_entry(root / "a", snapshot)
    assert placeholder.children == ()
    assert names(repo.expand(placeholder.path)) == ["b"]
