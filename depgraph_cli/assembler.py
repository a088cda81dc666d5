"""Graph assembly: discovery, extraction, resolution and scoring in one pass.

Files are scanned in batches on a thread pool. Workers never touch shared
state: each returns a :class:`FileScan` with its own edges and a partial
connection counter, and the assembler thread folds each finished batch into
the shared :class:`ConnectionCounter`. That counter is the only structure
written during the run.
"""

from __future__ import annotations

import logging
import posixpath
import threading
from collections import Counter
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Dict, List, Mapping, Optional, Set, Union

from .config import AnalysisSettings
from .discovery import discover_files
from .exceptions import NothingToAnalyzeError
from .extractor import extract_imports
from .file_index import FileIndex
from .models import DependencyEdge, DependencyGraph, FileRecord
from .resolver import PathResolver, is_relative_specifier
from .scoring import score_nodes

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int, int], None]


@dataclass
class FileScan:
    """Everything learned from one file, produced by a single worker."""

    path: str
    line_count: int
    specifiers: Set[str] = field(default_factory=set)
    edges: List[DependencyEdge] = field(default_factory=list)
    connections: Counter = field(default_factory=Counter)


class ConnectionCounter:
    """Connection counts keyed by node id, merged from per-file partials."""

    def __init__(self) -> None:
        self._counts: Counter = Counter()
        self._lock = threading.Lock()

    def merge(self, partial: Mapping[str, int]) -> None:
        with self._lock:
            self._counts.update(partial)

    def get(self, node_id: str) -> int:
        with self._lock:
            return self._counts.get(node_id, 0)

    def snapshot(self) -> Dict[str, int]:
        with self._lock:
            return dict(self._counts)


def build_record(rel_path: str, line_count: int) -> FileRecord:
    directory = posixpath.dirname(rel_path)
    extension = posixpath.splitext(rel_path)[1].lstrip(".").lower()
    return FileRecord(
        id=rel_path,
        label=posixpath.basename(rel_path),
        extension=extension or "other",
        line_count=line_count,
        directory=directory or "root",
    )


def count_lines(content: str) -> int:
    return content.count("\n") + 1


class GraphAssembler:
    """Build a :class:`DependencyGraph` for the directory *root*."""

    def __init__(
        self,
        root: Union[str, Path],
        settings: Optional[AnalysisSettings] = None,
        progress: Optional[ProgressCallback] = None,
    ) -> None:
        self.root = Path(root)
        self.settings = settings or AnalysisSettings()
        self.progress = progress

    def assemble(self) -> DependencyGraph:
        paths = discover_files(self.root, self.settings)
        if not paths:
            raise NothingToAnalyzeError(self.root)
        logger.info("Found %d relevant files", len(paths))

        index = FileIndex.build(paths)
        resolver = PathResolver(index)
        logger.debug("Built file index with %d entries", len(index))

        edges: List[DependencyEdge] = []
        counter = ConnectionCounter()
        scans = self._scan_all(paths, resolver, edges, counter)

        nodes = [build_record(scan.path, scan.line_count) for scan in scans]
        score_nodes(nodes, counter.snapshot())

        logger.info("Generated %d dependency edges from %d files", len(edges), len(nodes))
        if not edges:
            for scan in scans[:3]:
                logger.debug(
                    "No edges: %s yielded %d specifiers %s",
                    scan.path, len(scan.specifiers), sorted(scan.specifiers)[:3],
                )
        return DependencyGraph(nodes=tuple(nodes), edges=tuple(edges))

    def _scan_all(
        self,
        paths: List[str],
        resolver: PathResolver,
        edges: List[DependencyEdge],
        counter: ConnectionCounter,
    ) -> List[FileScan]:
        """Scan *paths* batch by batch, merging each batch's results into *edges* and *counter*."""
        total = len(paths)
        batch_size = self.settings.batch_size_for(total)
        batches = (total + batch_size - 1) // batch_size
        logger.debug("Processing dependencies in %d batches of %d", batches, batch_size)

        scans: List[FileScan] = []
        workers = min(self.settings.max_workers, batch_size)
        with ThreadPoolExecutor(max_workers=workers) as executor:
            for number, start in enumerate(range(0, total, batch_size), start=1):
                batch = paths[start:start + batch_size]
                logger.debug("Processing batch %d/%d", number, batches)
                # map() yields in submission order, which keeps edge order stable
                batch_scans = list(executor.map(lambda p: self.scan_file(p, resolver), batch))
                batch_counts: Counter = Counter()
                for scan in batch_scans:
                    edges.extend(scan.edges)
                    batch_counts.update(scan.connections)
                counter.merge(batch_counts)
                scans.extend(batch_scans)
                if self.progress is not None:
                    self.progress(min(start + batch_size, total), total)
        return scans

    def read_file(self, rel_path: str) -> str:
        """Read a file as text; unreadable files count as empty."""
        try:
            return (self.root / rel_path).read_text(encoding="utf-8", errors="replace")
        except OSError as exc:
            logger.warning("Could not read %s, treating it as empty: %s", rel_path, exc)
            return ""

    def scan_file(self, rel_path: str, resolver: PathResolver) -> FileScan:
        content = self.read_file(rel_path)
        scan = FileScan(path=rel_path, line_count=count_lines(content))
        scan.specifiers = extract_imports(content)

        for specifier in sorted(scan.specifiers):
            if not is_relative_specifier(specifier):
                continue
            target = resolver.resolve(rel_path, specifier)
            if target is None or target == rel_path:
                continue
            scan.edges.append(DependencyEdge(source=rel_path, target=target))
            scan.connections[rel_path] += 1
            scan.connections[target] += 1
        return scan


def analyze_repository(
    root: Union[str, Path],
    settings: Optional[AnalysisSettings] = None,
    progress: Optional[ProgressCallback] = None,
) -> DependencyGraph:
    """Analyse the materialised repository at *root*.

    Raises:
        RepositoryNotFoundError: *root* is not a directory.
        NothingToAnalyzeError: no file matched the extension allow-list.
    """
    return GraphAssembler(root, settings=settings, progress=progress).assemble()
