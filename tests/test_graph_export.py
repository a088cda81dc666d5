"""Tests for JSON and DOT export."""

import json
from pathlib import Path

from depgraph_cli.assembler import analyze_repository
from depgraph_cli.graph_export import export_dot, export_json, graph_to_dict, graph_to_dot


def test_export_json_round_trips_contract(sample_project_path: Path, temp_dir: Path):
    graph = analyze_repository(sample_project_path)
    out = temp_dir / "graph.json"
    export_json(graph, out)

    data = json.loads(out.read_text(encoding="utf-8"))
    assert len(data["nodes"]) == len(graph.nodes)
    assert len(data["edges"]) == len(graph.edges)
    for node in data["nodes"]:
        assert {"id", "label", "type", "size", "lines", "directory", "importance"} <= set(node)
    for edge in data["edges"]:
        assert set(edge) == {"source", "target", "value"}


def test_focus_keeps_neighbours(sample_project_path: Path):
    graph = analyze_repository(sample_project_path)
    data = graph_to_dict(graph, focus="styles/main")

    ids = {n["id"] for n in data["nodes"]}
    assert ids == {"src/styles/main.css", "src/styles/base.css", "src/app.tsx"}
    assert len(data["edges"]) == 2


def test_unknown_focus_falls_back_to_full_graph(sample_project_path: Path):
    graph = analyze_repository(sample_project_path)
    assert len(graph_to_dict(graph, focus="no-such-file")["nodes"]) == len(graph.nodes)


def test_export_dot(sample_project_path: Path, temp_dir: Path):
    graph = analyze_repository(sample_project_path)
    out = temp_dir / "graph.dot"
    export_dot(graph, out)

    text = out.read_text(encoding="utf-8")
    assert text.startswith("digraph DependencyGraph {")
    assert '"src/index.ts" -> "src/app.tsx";' in text
    assert text.rstrip().endswith("}")


def test_dot_escapes_quotes(make_repo):
    root = make_repo({'we"ird.ts': "import './b';", "b.ts": ""})
    dot = graph_to_dot(analyze_repository(root))
    assert '"we\\"ird.ts" -> "b.ts";' in dot
