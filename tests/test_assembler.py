"""Tests for end-to-end graph assembly."""

import sys
import threading
from collections import Counter
from pathlib import Path

import pytest

from depgraph_cli.assembler import (
    ConnectionCounter,
    GraphAssembler,
    analyze_repository,
    build_record,
    count_lines,
)
from depgraph_cli.config import AnalysisSettings
from depgraph_cli.exceptions import NothingToAnalyzeError, RepositoryNotFoundError


def _pairs(graph):
    return [(e.source, e.target) for e in graph.edges]


class TestScenarios:
    """Concrete repositories with known graphs."""

    def test_single_import(self, make_repo):
        root = make_repo({"a.ts": "import { b } from './b'", "b.ts": ""})
        graph = analyze_repository(root)

        assert [n.id for n in graph.nodes] == ["a.ts", "b.ts"]
        assert [e.to_dict() for e in graph.edges] == [
            {"source": "a.ts", "target": "b.ts", "value": 1}
        ]

    def test_directory_index(self, make_repo):
        root = make_repo({
            "index.ts": "import { fmt } from './utils';",
            "utils/index.ts": "export const fmt = 1;",
        })
        graph = analyze_repository(root)
        assert _pairs(graph) == [("index.ts", "utils/index.ts")]

    def test_bare_specifier_ignored(self, make_repo):
        root = make_repo({
            "main.ts": "import React from 'react';",
            "react.ts": "",
            "react/index.ts": "",
        })
        graph = analyze_repository(root)
        assert graph.edges == ()

    def test_file_without_imports(self, make_repo):
        root = make_repo({
            "a.ts": "import './shared';\n",
            "b.ts": "require('./shared');\n",
            "shared.ts": "export const x = 1;\n",
        })
        graph = analyze_repository(root)
        shared = graph.node("shared.ts")

        assert graph.outgoing("shared.ts") == ()
        assert len(graph.incoming("shared.ts")) == 2
        assert shared.importance == 7 + 2 * 0.5

    def test_mutual_imports_are_two_edges(self, make_repo):
        root = make_repo({
            "a.js": "const b = require('./b');",
            "b.js": "const a = require('./a');",
        })
        graph = analyze_repository(root)
        assert sorted(_pairs(graph)) == [("a.js", "b.js"), ("b.js", "a.js")]


def test_sample_project(sample_project_path: Path, sample_edges):
    graph = analyze_repository(sample_project_path)

    assert len(graph.nodes) == 8
    assert set(_pairs(graph)) == sample_edges
    assert len(graph.edges) == len(sample_edges)

    app = graph.node("src/app.tsx")
    assert app.importance == 7 + 4 * 0.5
    assert graph.node("README.md").importance == 6
    assert graph.node("config.json").importance == 8.5


def test_referential_integrity_and_no_self_edges(sample_project_path: Path):
    graph = analyze_repository(sample_project_path)
    ids = {n.id for n in graph.nodes}
    for edge in graph.edges:
        assert edge.source in ids
        assert edge.target in ids
        assert edge.source != edge.target


@pytest.mark.skipif(sys.platform == "win32", reason="backslash is a path separator on Windows")
def test_backslash_in_filename_keeps_edges_on_known_nodes(make_repo):
    root = make_repo({"x\\y.ts": "", "main.ts": "import y from './x/y';"})
    graph = analyze_repository(root)

    ids = {n.id for n in graph.nodes}
    assert ids == {"main.ts", "x\\y.ts"}
    assert _pairs(graph) == [("main.ts", "x\\y.ts")]
    assert graph.node("x\\y.ts").importance == graph.node("main.ts").importance


def test_self_import_is_dropped(make_repo):
    root = make_repo({"utils/index.ts": "export * from '.';\nimport x from './index';\n"})
    graph = analyze_repository(root)
    assert graph.edges == ()


def test_duplicate_pairs_are_kept(make_repo):
    root = make_repo({
        "a.ts": "import { b } from './b';\nconst again = require('./b.ts');\n",
        "b.ts": "",
    })
    graph = analyze_repository(root)
    assert _pairs(graph) == [("a.ts", "b.ts"), ("a.ts", "b.ts")]
    assert graph.node("b.ts").importance == 7 + 2 * 0.5


def test_unreadable_file_becomes_empty_node(make_repo, monkeypatch):
    root = make_repo({"locked.ts": "import './b';", "b.ts": ""})
    real_read_text = Path.read_text

    def fake_read_text(self, *args, **kwargs):
        if self.name == "locked.ts":
            raise PermissionError(13, "Permission denied", str(self))
        return real_read_text(self, *args, **kwargs)

    monkeypatch.setattr(Path, "read_text", fake_read_text)
    graph = analyze_repository(root)

    assert graph.node("locked.ts") is not None
    assert graph.node("locked.ts").line_count == 1
    assert graph.edges == ()


def test_empty_repository_raises(make_repo):
    root = make_repo({"image.png": "", "notes.txt": ""})
    with pytest.raises(NothingToAnalyzeError):
        analyze_repository(root)


def test_missing_root_raises(temp_dir: Path):
    with pytest.raises(RepositoryNotFoundError):
        analyze_repository(temp_dir / "missing")


def test_many_files_across_batches(make_repo):
    files = {f"mod{i:03d}.ts": f"import x from './mod{(i + 1) % 150:03d}';" for i in range(150)}
    root = make_repo(files)
    settings = AnalysisSettings(max_workers=8)

    graph = analyze_repository(root, settings)

    assert len(graph.nodes) == 150
    assert len(graph.edges) == 150
    assert all(n.importance == 7 + 2 * 0.5 for n in graph.nodes)


def test_progress_callback_reports_each_batch(make_repo):
    root = make_repo({f"f{i:03d}.js": "" for i in range(250)})
    calls = []
    GraphAssembler(root, progress=lambda done, total: calls.append((done, total))).assemble()

    # 250 files -> batch size 25 -> 10 batches
    assert len(calls) == 10
    assert calls[-1] == (250, 250)
    assert [done for done, _ in calls] == sorted(done for done, _ in calls)


def test_node_order_is_discovery_order(sample_project_path: Path):
    graph = analyze_repository(sample_project_path)
    ids = [n.id for n in graph.nodes]
    assert ids == sorted(ids)


def test_build_record():
    record = build_record("src/components/Button.TSX", 42)
    assert record.label == "Button.TSX"
    assert record.extension == "tsx"
    assert record.directory == "src/components"
    assert record.size == 4

    root_record = build_record("Makefile.json", 3)
    assert root_record.directory == "root"
    assert root_record.size == 1

    assert build_record("LICENSE", 1).extension == "other"


def test_count_lines():
    assert count_lines("") == 1
    assert count_lines("a\nb\n") == 3


class TestConnectionCounter:

    def test_merge_and_get(self):
        counter = ConnectionCounter()
        counter.merge(Counter({"a": 1, "b": 1}))
        counter.merge({"a": 2})
        assert counter.get("a") == 3
        assert counter.get("b") == 1
        assert counter.get("missing") == 0
        assert counter.snapshot() == {"a": 3, "b": 1}

    def test_concurrent_merges_lose_nothing(self):
        counter = ConnectionCounter()

        def worker():
            for _ in range(1000):
                counter.merge({"hot": 1, "cold": 2})

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert counter.get("hot") == 8000
        assert counter.get("cold") == 16000
