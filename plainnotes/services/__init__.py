from .autosave import AutosaveService
from .rename_service import RenameService
from .selection import SelectionMemory
from .tree_service import TreeService

__all__ = ["AutosaveService",
           "RenameService",
           "SelectionMemory",
           "TreeService",
           ]
