"""
Repository acquisition: URL validation and throwaway shallow clones.

The analysis itself only reads a local directory. This module owns the
temporary clone's lifecycle and removes it whether analysis succeeds or not.
"""

from __future__ import annotations

import logging
import os
import re
import shutil
import subprocess
import tempfile
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Union

from .exceptions import InvalidRepositoryURLError, RepositoryCloneError

logger = logging.getLogger(__name__)

REPO_URL_RE = re.compile(r"^https://[^/\s]+/[^/\s]+/[^/\s]+")
CLONE_TIMEOUT_SECONDS = 300


def validate_repo_url(url: str) -> str:
    """Return the trimmed URL if it looks like ``https://<host>/<owner>/<repo>...``."""
    clean = (url or "").strip()
    if not REPO_URL_RE.match(clean):
        raise InvalidRepositoryURLError(url)
    return clean


def clone_repository(url: str, destination: Union[str, Path], depth: int = 1) -> None:
    """Shallow-clone *url* into *destination* with the git CLI."""
    env = os.environ.copy()
    env["GIT_TERMINAL_PROMPT"] = "0"
    cmd = ["git", "clone", "--depth", str(depth), url, str(destination)]
    logger.info("Cloning %s", url)
    try:
        result = subprocess.run(
            cmd,
            env=env,
            capture_output=True,
            text=True,
            timeout=CLONE_TIMEOUT_SECONDS,
        )
    except (OSError, subprocess.TimeoutExpired) as exc:
        raise RepositoryCloneError(url, str(exc)) from exc
    if result.returncode != 0:
        raise RepositoryCloneError(url, result.stderr)


@contextmanager
def cloned_repository(url: str, depth: int = 1) -> Iterator[Path]:
    """Clone *url* into a temporary directory and yield its path.

    The directory is removed on exit, including when cloning or the caller's
    analysis raises.
    """
    clean = validate_repo_url(url)
    temp_dir = Path(tempfile.mkdtemp(prefix="depgraph-"))
    try:
        clone_repository(clean, temp_dir, depth=depth)
        yield temp_dir
    finally:
        shutil.rmtree(temp_dir, ignore_errors=True)
        logger.debug("Removed clone directory %s", temp_dir)
