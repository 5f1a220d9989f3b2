from .repo import NoteRepository
from .scanner import DirectoryScanner
from .tree_store import TreeStore

__all__ = ["NoteRepository", "DirectoryScanner", "TreeStore"]
