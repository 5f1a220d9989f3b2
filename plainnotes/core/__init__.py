from .entries import Entry, EntryKind, Folder, NoteFile, canonical_id, count_entries, find_entry, iter_entries
from .ordering import natural_key
from .paths import EmptyPathError, ResolvedPath, display_path, resolve_destination, with_note_extension

__all__ = ["Entry",
           "EntryKind",
           "Folder",
           "NoteFile",
           "canonical_id",
           "count_entries",
           "find_entry",
           "iter_entries",
           "natural_key",
           "EmptyPathError",
           "ResolvedPath",
           "display_path",
           "resolve_destination",
           "with_note_extension",
           ]
