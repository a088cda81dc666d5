"""depgraph: file-level dependency graphs for arbitrary source repositories."""

from __future__ import annotations

__version__ = "0.1.0"

from .assembler import GraphAssembler, analyze_repository
from .models import DependencyEdge, DependencyGraph, FileRecord

__all__ = [
    "DependencyEdge",
    "DependencyGraph",
    "FileRecord",
    "GraphAssembler",
    "__version__",
    "analyze_repository",
]
