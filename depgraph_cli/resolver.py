"""Map import specifiers onto files of the repository."""

from __future__ import annotations

import logging
import posixpath
from typing import Dict, Optional, Sequence, Tuple

from .config import RESOLUTION_EXTENSIONS
from .file_index import FileIndex

logger = logging.getLogger(__name__)


def is_relative_specifier(specifier: str) -> bool:
    """Only ``./``, ``../`` and ``/`` specifiers point inside the repository."""
    return specifier.startswith((".", "/"))


class PathResolver:
    """Resolve ``(source file, specifier)`` pairs against a :class:`FileIndex`.

    Resolution order, first hit wins:

    1. the specifier joined onto the source file's directory, as given and
       then with each extension of ``extensions`` appended;
    2. ``index<ext>`` inside that path when it names a known directory;
    3. any file in the repository with the specifier's basename plus an
       extension, lexicographically smallest path first.

    A leading ``/`` is taken relative to the repository root. Paths that
    climb above the root only get step 3. Bare specifiers (``react``,
    ``os``) are never resolved. Results are cached; the index is read-only
    so a given pair always resolves the same way.
    """

    def __init__(self, index: FileIndex, extensions: Sequence[str] = RESOLUTION_EXTENSIONS) -> None:
        self.index = index
        self.extensions: Tuple[str, ...] = tuple(extensions)
        self._cache: Dict[Tuple[str, str], Optional[str]] = {}

    def resolve(self, source_file: str, specifier: str) -> Optional[str]:
        if not is_relative_specifier(specifier):
            return None
        source_dir = posixpath.dirname(source_file.replace("\\", "/"))
        key = (source_dir, specifier)
        if key not in self._cache:
            # Concurrent writers store the same value, so no lock is needed.
            self._cache[key] = self._resolve(source_dir, specifier)
        return self._cache[key]

    def _resolve(self, source_dir: str, specifier: str) -> Optional[str]:
        candidate = self.candidate_path(source_dir, specifier)
        if candidate is not None:
            hit = self._match_exact(candidate) or self._match_directory_index(candidate)
            if hit:
                return hit
        hit = self._match_basename(specifier)
        if hit is None:
            logger.debug("Unresolved specifier %r from %s/", specifier, source_dir or ".")
        return hit

    @staticmethod
    def candidate_path(source_dir: str, specifier: str) -> Optional[str]:
        """Repository-relative path the specifier points at, ``None`` if it leaves the root."""
        spec = specifier.replace("\\", "/")
        joined = spec.lstrip("/") if spec.startswith("/") else posixpath.join(source_dir, spec)
        normalized = posixpath.normpath(joined) if joined else "."
        if normalized == ".." or normalized.startswith("../"):
            return None
        return "" if normalized == "." else normalized

    def _match_exact(self, candidate: str) -> Optional[str]:
        if not candidate:
            return None
        # specifiers that already carry an extension ("./x.css") match as written
        hit = self.index.lookup(candidate)
        if hit:
            return hit
        for ext in self.extensions:
            hit = self.index.lookup(candidate + ext)
            if hit:
                return hit
        return None

    def _match_directory_index(self, candidate: str) -> Optional[str]:
        if not self.index.has_directory(candidate):
            return None
        by_name: Dict[str, str] = {}
        for path in sorted(self.index.files_in(candidate)):
            by_name.setdefault(posixpath.basename(path).lower(), path)
        for ext in self.extensions:
            hit = by_name.get(f"index{ext}")
            if hit:
                return hit
        return None

    def _match_basename(self, specifier: str) -> Optional[str]:
        name = posixpath.basename(specifier.replace("\\", "/").rstrip("/"))
        if not name or name in (".", ".."):
            return None
        for ext in self.extensions:
            matches = self.index.by_basename(name + ext)
            if matches:
                return matches[0]
        return None
