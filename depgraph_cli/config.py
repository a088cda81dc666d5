"""Configuration paths and analysis defaults for depgraph."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, FrozenSet, Tuple

BASE_DIR = Path(os.environ.get("DEPGRAPH_HOME", str(Path.home() / ".depgraph"))).expanduser()
CONFIG_FILE = BASE_DIR / "config.toml"

# Directories never descended into (VCS metadata, dependency caches, build output, editor state)
SKIP_DIRS: FrozenSet[str] = frozenset({
    ".git", "node_modules", ".next", "dist", "build", ".vscode", ".idea", "coverage",
    "__pycache__", ".venv", "venv", ".tox", ".mypy_cache", ".pytest_cache",
})

# Dot-prefixed entries are skipped, except these
ALLOWED_DOTFILES: FrozenSet[str] = frozenset({".env"})

RELEVANT_EXTENSIONS: FrozenSet[str] = frozenset({
    ".ts", ".tsx", ".js", ".jsx", ".go", ".py", ".java", ".php", ".rb", ".cs",
    ".cpp", ".h", ".hpp", ".json", ".md", ".css", ".scss", ".html",
})

# Order matters: the first extension that resolves wins.
RESOLUTION_EXTENSIONS: Tuple[str, ...] = (
    ".ts", ".tsx", ".js", ".jsx", ".go", ".py", ".java", ".php", ".rb", ".cs", ".cpp", ".h",
)

TYPE_IMPORTANCE: Dict[str, float] = {
    "json": 8,
    "js": 7, "ts": 7, "tsx": 7, "jsx": 7,
    "go": 7, "py": 7, "java": 7, "cpp": 7, "c": 7, "rs": 7,
    "md": 6, "html": 6,
    "h": 6, "hpp": 6,
    "php": 6, "rb": 6, "cs": 6,
    "css": 5, "scss": 5,
}
DEFAULT_IMPORTANCE = 3.0
CONNECTION_WEIGHT = 0.5

DISCOVERY_BATCH_SIZE = 50
MIN_BATCH_SIZE = 10
MAX_BATCH_SIZE = 100
DEFAULT_MAX_WORKERS = min(32, (os.cpu_count() or 1) + 4)


@dataclass
class AnalysisSettings:
    """Effective knobs for a single analysis run."""

    skip_dirs: FrozenSet[str] = SKIP_DIRS
    extensions: FrozenSet[str] = RELEVANT_EXTENSIONS
    allowed_dotfiles: FrozenSet[str] = ALLOWED_DOTFILES
    max_workers: int = DEFAULT_MAX_WORKERS
    discovery_batch_size: int = DISCOVERY_BATCH_SIZE
    min_batch_size: int = MIN_BATCH_SIZE
    max_batch_size: int = MAX_BATCH_SIZE

    def __post_init__(self) -> None:
        if self.max_workers < 1:
            raise ValueError(f"max_workers must be >= 1, got {self.max_workers}")
        if self.min_batch_size < 1 or self.max_batch_size < self.min_batch_size:
            raise ValueError(
                f"invalid batch bounds: min={self.min_batch_size} max={self.max_batch_size}"
            )

    def batch_size_for(self, total_files: int) -> int:
        """Scale the batch with the repository size, clamped to the configured range."""
        return min(self.max_batch_size, max(self.min_batch_size, total_files // 10))
