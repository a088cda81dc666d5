"""Repository walk producing the candidate file set.

Directories are listed level by level. Each level is split into batches of
``settings.discovery_batch_size`` directories that are listed concurrently,
so the number of in-flight ``scandir`` calls stays bounded on very large
trees. Unreadable directories are skipped without failing the walk.
"""

from __future__ import annotations

import logging
import os
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import List, Optional, Tuple, Union

from .config import AnalysisSettings
from .exceptions import RepositoryNotFoundError

logger = logging.getLogger(__name__)


def is_relevant_file(name: str, settings: AnalysisSettings) -> bool:
    return os.path.splitext(name)[1].lower() in settings.extensions


def _is_hidden(name: str, settings: AnalysisSettings) -> bool:
    return name.startswith(".") and name not in settings.allowed_dotfiles


def _scan_directory(directory: str, settings: AnalysisSettings) -> Tuple[List[str], List[str]]:
    """List one directory. Returns (subdirectories to visit, relevant files)."""
    subdirs: List[str] = []
    files: List[str] = []
    try:
        with os.scandir(directory) as entries:
            for entry in entries:
                if _is_hidden(entry.name, settings):
                    continue
                try:
                    # Symlinked directories are not followed, so cycles are impossible.
                    if entry.is_dir(follow_symlinks=False):
                        if entry.name not in settings.skip_dirs:
                            subdirs.append(entry.path)
                    elif entry.is_file() and is_relevant_file(entry.name, settings):
                        files.append(entry.path)
                except OSError as exc:
                    logger.debug("Skipping unreadable entry %s: %s", entry.path, exc)
    except OSError as exc:
        logger.debug("Skipping unreadable directory %s: %s", directory, exc)
    return subdirs, files


def discover_files(
    root: Union[str, Path],
    settings: Optional[AnalysisSettings] = None,
) -> List[str]:
    """Return the repository-relative POSIX paths of every relevant file under *root*.

    The result is sorted, so node order is stable for a given file set even
    though directories are listed concurrently.

    Raises:
        RepositoryNotFoundError: *root* is not an existing directory.
    """
    settings = settings or AnalysisSettings()
    root_path = Path(root)
    if not root_path.is_dir():
        raise RepositoryNotFoundError(root_path)
    root_str = str(root_path)

    found: List[str] = []
    level: List[str] = [root_str]
    batch_size = settings.discovery_batch_size

    with ThreadPoolExecutor(max_workers=min(settings.max_workers, batch_size)) as executor:
        while level:
            next_level: List[str] = []
            for start in range(0, len(level), batch_size):
                batch = level[start:start + batch_size]
                for subdirs, files in executor.map(lambda d: _scan_directory(d, settings), batch):
                    next_level.extend(subdirs)
                    found.extend(files)
            level = next_level

    rel_paths = {Path(os.path.relpath(p, root_str)).as_posix() for p in found}
    logger.debug("Discovered %d relevant files under %s", len(rel_paths), root_str)
    return sorted(rel_paths)
