from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

_SKIPPED_SEGMENTS = {"", ".", ".."}


class EmptyPathError(ValueError):
    """The typed path has no usable segment."""


@dataclass(frozen=True)
class ResolvedPath:
    root: Path
    directories: tuple[str, ...]
    base_name: str

    @property
    def directory(self) -> Path:
        return self.root.joinpath(*self.directories)

    def file_path(self, extension: str) -> Path:
        return self.directory / with_note_extension(self.base_name, extension)


def split_segments(path_string: str) -> list[str]:
    return [s for s in (path_string or "").split("/") if s not in _SKIPPED_SEGMENTS]


def resolve_destination(path_string: str, root: Path) -> ResolvedPath:
    """
    Turn a user-typed "a/b/name" into directory names plus a file base name.

    Empty, "." and ".." segments are dropped, so duplicate or surrounding
    slashes are harmless and the result always stays under root. Pure: no
    filesystem access.
    """
    segments = split_segments(path_string)
    if not segments:
        raise EmptyPathError(f"no usable path segments in {path_string!r}")
    return ResolvedPath(
        root=Path(root),
        directories=tuple(segments[:-1]),
        base_name=segments[-1],
    )


def with_note_extension(name: str, extension: str) -> str:
    return name if name.endswith(extension) else f"{name}{extension}"


def display_path(path: Path, root: Path, extension: str) -> str:
    """Root-relative slash path without the note extension ("a/b" for root/a/b.md)."""
    path = Path(path)
    try:
        rel = path.relative_to(root)
    except ValueError:
        return _strip_extension(path.name, extension)
    parts = list(rel.parts)
    if not parts:
        return ""
    parts[-1] = _strip_extension(parts[-1], extension)
    return "/".join(parts)


def _strip_extension(name: str, extension: str) -> str:
    if extension and name.endswith(extension) and len(name) > len(extension):
        return name[: -len(extension)]
    return name
