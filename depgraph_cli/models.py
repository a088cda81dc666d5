"""Core data models produced by the dependency analysis."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, Optional, Tuple


@dataclass
class FileRecord:
    id: str
    label: str
    extension: str
    line_count: int
    directory: str
    importance: float = 1.0

    @property
    def size(self) -> int:
        return max(1, self.line_count // 10)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "label": self.label,
            "type": self.extension,
            "size": self.size,
            "lines": self.line_count,
            "directory": self.directory,
            "importance": self.importance,
        }


@dataclass(frozen=True)
class DependencyEdge:
    source: str
    target: str
    weight: int = 1

    def __post_init__(self) -> None:
        if self.source == self.target:
            raise ValueError(f"self-edge on {self.source!r}")
        if self.weight < 1:
            raise ValueError(f"edge weight must be positive, got {self.weight}")

    def to_dict(self) -> Dict[str, Any]:
        return {"source": self.source, "target": self.target, "value": self.weight}


@dataclass(frozen=True)
class DependencyGraph:
    """File-level dependency graph.

    ``nodes`` keep discovery order; ``edges`` keep processing order and may
    contain repeated (source, target) pairs when several distinct specifiers
    in one file resolve to the same target.
    """

    nodes: Tuple[FileRecord, ...] = ()
    edges: Tuple[DependencyEdge, ...] = ()
    _by_id: Dict[str, FileRecord] = field(default_factory=dict, init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "nodes", tuple(self.nodes))
        object.__setattr__(self, "edges", tuple(self.edges))
        object.__setattr__(self, "_by_id", {n.id: n for n in self.nodes})

    def node(self, node_id: str) -> Optional[FileRecord]:
        return self._by_id.get(node_id)

    def __contains__(self, node_id: object) -> bool:
        return node_id in self._by_id

    def __iter__(self) -> Iterator[FileRecord]:
        return iter(self.nodes)

    def outgoing(self, node_id: str) -> Tuple[DependencyEdge, ...]:
        return tuple(e for e in self.edges if e.source == node_id)

    def incoming(self, node_id: str) -> Tuple[DependencyEdge, ...]:
        return tuple(e for e in self.edges if e.target == node_id)

    def stats(self) -> Dict[str, int]:
        return {"nodes": len(self.nodes), "edges": len(self.edges)}

    def to_dict(self) -> Dict[str, Any]:
        return {
            "nodes": [n.to_dict() for n in self.nodes],
            "edges": [e.to_dict() for e in self.edges],
        }
