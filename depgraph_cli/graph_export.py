"""Graph export helpers for JSON and Graphviz DOT outputs."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, List

from .models import DependencyEdge, DependencyGraph, FileRecord


def graph_to_dict(graph: DependencyGraph, focus: str = "") -> Dict[str, Any]:
    selected = _focused_subgraph(graph, focus)
    return {
        "nodes": [n.to_dict() for n in selected["nodes"]],
        "edges": [e.to_dict() for e in selected["edges"]],
    }


def graph_to_json(graph: DependencyGraph, focus: str = "", indent: int = 2) -> str:
    return json.dumps(graph_to_dict(graph, focus), indent=indent)


def export_json(graph: DependencyGraph, output_file: Path, focus: str = "") -> None:
    output_file.write_text(graph_to_json(graph, focus), encoding="utf-8")


def graph_to_dot(graph: DependencyGraph, focus: str = "") -> str:
    selected = _focused_subgraph(graph, focus)

    lines = ["digraph DependencyGraph {"]
    lines.append("  rankdir=LR;")

    for node in selected["nodes"]:
        label = f"{node.label}\\n{node.directory}"
        lines.append(
            f'  "{_esc(node.id)}" [label="{_esc(label)}", importance={node.importance:g}];'
        )

    for edge in selected["edges"]:
        lines.append(f'  "{_esc(edge.source)}" -> "{_esc(edge.target)}";')

    lines.append("}")
    return "\n".join(lines)


def export_dot(graph: DependencyGraph, output_file: Path, focus: str = "") -> None:
    output_file.write_text(graph_to_dot(graph, focus), encoding="utf-8")


def _focused_subgraph(graph: DependencyGraph, focus: str) -> Dict[str, List]:
    """Nodes whose id contains *focus*, their direct neighbours and the edges touching them.

    Falls back to the whole graph when *focus* is empty or matches nothing.
    """
    nodes: List[FileRecord] = list(graph.nodes)
    edges: List[DependencyEdge] = list(graph.edges)
    if not focus:
        return {"nodes": nodes, "edges": edges}

    focus_ids = {n.id for n in nodes if focus in n.id}
    if not focus_ids:
        return {"nodes": nodes, "edges": edges}

    edge_subset = [e for e in edges if e.source in focus_ids or e.target in focus_ids]
    node_subset = set(focus_ids)
    for e in edge_subset:
        node_subset.add(e.source)
        node_subset.add(e.target)
    return {"nodes": [n for n in nodes if n.id in node_subset], "edges": edge_subset}


def _esc(text: str) -> str:
    return text.replace('"', '\\"')
