"""Heuristic node importance: file-type weight plus connectivity."""

from __future__ import annotations

from typing import Iterable, Mapping

from .config import CONNECTION_WEIGHT, DEFAULT_IMPORTANCE, TYPE_IMPORTANCE
from .models import FileRecord


def base_importance(extension: str) -> float:
    return float(TYPE_IMPORTANCE.get(extension.lower(), DEFAULT_IMPORTANCE))


def importance(extension: str, connections: int) -> float:
    return base_importance(extension) + connections * CONNECTION_WEIGHT


def score_nodes(nodes: Iterable[FileRecord], connection_counts: Mapping[str, int]) -> None:
    """Set ``importance`` on every node in place."""
    for node in nodes:
        node.importance = importance(node.extension, connection_counts.get(node.id, 0))
