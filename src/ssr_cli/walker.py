"""
File discovery with ripgrep-style type filters.

Explicitly named files are always visited. Directories are walked
recursively, skipping hidden entries, and keep only files whose name matches
one of the selected types' globs.
"""

from fnmatch import fnmatchcase
from pathlib import Path
from typing import Iterable, Iterator

from ssr_tree_sitter.languages import DEFAULT_TYPES


class FileTypes:
    """Named sets of file name globs (`--type` / `--type-add`)"""

    def __init__(self):
        self._types: dict[str, list[str]] = {name: list(globs) for name, globs in DEFAULT_TYPES.items()}

    def add(self, definition: str) -> None:
        """Add globs from a `name:glob[,glob...]` definition"""
        name, sep, globs = definition.partition(":")
        name = name.strip()
        if not sep or not name or not globs.strip():
            raise ValueError(f"invalid type definition '{definition}' (expected name:glob)")
        self._types.setdefault(name, []).extend(g.strip() for g in globs.split(",") if g.strip())

    def globs(self, names: Iterable[str]) -> list[str]:
        result = []
        for name in names:
            if name not in self._types:
                raise ValueError(f"unknown file type '{name}'")
            result.extend(self._types[name])
        return result

    @property
    def names(self) -> list[str]:
        return sorted(self._types)


def matches_globs(path: Path, globs: list[str]) -> bool:
    return any(fnmatchcase(path.name, g) for g in globs)


def walk_files(paths: Iterable[Path], globs: list[str]) -> Iterator[Path]:
    """Yield files to visit in a stable order"""
    for root in paths:
        if not root.is_dir():
            yield root
            continue
        yield from _walk_dir(root, globs)


def _walk_dir(directory: Path, globs: list[str]) -> Iterator[Path]:
    entries = sorted(directory.iterdir(), key=lambda p: p.name)
    for entry in entries:
        if entry.name.startswith("."):
            continue
        if entry.is_dir():
            if entry.is_symlink():
                continue
            yield from _walk_dir(entry, globs)
        elif entry.is_file() and matches_globs(entry, globs):
            yield entry
