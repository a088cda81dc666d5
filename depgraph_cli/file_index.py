"""Case-insensitive lookup structures over a repository's file set."""

from __future__ import annotations

import posixpath
from typing import Dict, FrozenSet, Iterable, List, Mapping, Optional, Set, Tuple


def normalize_path(path: str) -> str:
    """Lower-case *path* and use forward slashes."""
    return path.replace("\\", "/").lower()


class FileIndex:
    """Read-only index built once from the discovered file set.

    Three views are kept:

    - normalised (lower-cased) path -> canonical relative path
    - normalised directory -> canonical paths directly inside it (``""`` is the root)
    - lower-cased basename -> canonical paths sharing that name, sorted

    Nothing touches the filesystem; build it before any resolution starts.
    """

    def __init__(
        self,
        by_path: Mapping[str, str],
        by_directory: Mapping[str, FrozenSet[str]],
        by_basename: Mapping[str, Tuple[str, ...]],
    ) -> None:
        self._by_path = dict(by_path)
        self._by_directory = dict(by_directory)
        self._by_basename = dict(by_basename)

    @classmethod
    def build(cls, paths: Iterable[str]) -> "FileIndex":
        by_path: Dict[str, str] = {}
        by_directory: Dict[str, Set[str]] = {}
        by_basename: Dict[str, List[str]] = {}

        for rel_path in paths:
            # ids stay exactly as discovered; only the lookup keys are normalised
            canonical = rel_path
            key = normalize_path(rel_path)
            by_path[key] = canonical
            by_directory.setdefault(posixpath.dirname(key), set()).add(canonical)
            by_basename.setdefault(posixpath.basename(key), []).append(canonical)

        return cls(
            by_path,
            {d: frozenset(files) for d, files in by_directory.items()},
            {name: tuple(sorted(files)) for name, files in by_basename.items()},
        )

    def __len__(self) -> int:
        return len(self._by_path)

    def __contains__(self, path: object) -> bool:
        return isinstance(path, str) and normalize_path(path) in self._by_path

    def lookup(self, path: str) -> Optional[str]:
        """Exact, case-insensitive match; returns the canonical path."""
        return self._by_path.get(normalize_path(path))

    def has_directory(self, directory: str) -> bool:
        return normalize_path(directory) in self._by_directory

    def files_in(self, directory: str) -> FrozenSet[str]:
        return self._by_directory.get(normalize_path(directory), frozenset())

    def by_basename(self, name: str) -> Tuple[str, ...]:
        return self._by_basename.get(name.lower(), ())
