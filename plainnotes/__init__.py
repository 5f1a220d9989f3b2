from .core import EmptyPathError, Entry, EntryKind, Folder, NoteFile, find_entry, resolve_destination
from .vault import DirectoryScanner, NoteRepository, TreeStore

__all__ = ['EmptyPathError',
           'Entry',
           'EntryKind',
           'Folder',
           'NoteFile',
           'find_entry',
           'resolve_destination',
           'DirectoryScanner',
           'NoteRepository',
           'TreeStore',
           ]
