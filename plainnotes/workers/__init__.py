from .move_note import MoveNoteWorker
from .tree_load import TreeLoadWorker

__all__ = [
    "MoveNoteWorker",
    "TreeLoadWorker",
]
