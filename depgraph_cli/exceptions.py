"""
Exceptions raised by repository analysis and acquisition.

Partial I/O failures (an unreadable file or directory) and unresolved
specifiers are recovered inside the analysis and never surface here.
"""

from __future__ import annotations

from pathlib import Path
from typing import Union


class DepGraphError(Exception):
    """Base class for every error depgraph reports to its caller."""


class InvalidRepositoryURLError(DepGraphError):
    """The repository reference is not of the form ``https://<host>/<owner>/<repo>``."""

    def __init__(self, url: str):
        self.url = url
        super().__init__(f"Invalid repository URL: {url!r}")


class RepositoryCloneError(DepGraphError):
    """Cloning the repository failed.

    Attributes:
        url: The repository that was being cloned
        stderr: Output reported by git, if any
    """

    def __init__(self, url: str, stderr: str = ""):
        self.url = url
        self.stderr = stderr.strip()
        message = f"Failed to clone {url}"
        if self.stderr:
            message = f"{message}: {self.stderr}"
        super().__init__(message)


class RepositoryNotFoundError(DepGraphError):
    """The analysis root does not exist or is not a directory."""

    def __init__(self, root: Union[str, Path]):
        self.root = Path(root)
        super().__init__(f"Not a directory: {self.root}")


class NothingToAnalyzeError(DepGraphError):
    """No file under the root matched the extension allow-list."""

    def __init__(self, root: Union[str, Path]):
        self.root = Path(root)
        super().__init__(f"No relevant source files found under {self.root}")
