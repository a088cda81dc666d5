"""Pytest configuration and fixtures for depgraph tests."""

import shutil
import tempfile
from pathlib import Path
from typing import Callable, Dict, Generator

import pytest


@pytest.fixture(autouse=True)
def _isolated_config(tmp_path_factory, monkeypatch):
    """Point the TOML config at an empty temp location so a developer's
    ``~/.depgraph/config.toml`` never leaks into test runs."""
    config_file = tmp_path_factory.mktemp("depgraph_home") / "config.toml"
    monkeypatch.setattr("depgraph_cli.config.CONFIG_FILE", config_file)
    monkeypatch.setattr("depgraph_cli.config_manager.CONFIG_FILE", config_file)
    return config_file


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for tests."""
    tmp = Path(tempfile.mkdtemp())
    yield tmp
    shutil.rmtree(tmp, ignore_errors=True)


@pytest.fixture
def sample_project_path() -> Path:
    """Get path to sample test project."""
    return Path(__file__).parent / "fixtures" / "sample_project"


@pytest.fixture
def make_repo(temp_dir: Path) -> Callable[[Dict[str, str]], Path]:
    """Write ``{relative path: content}`` into the temp dir and return its root."""

    def _make(files: Dict[str, str]) -> Path:
        for rel_path, content in files.items():
            target = temp_dir / rel_path
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(content, encoding="utf-8")
        return temp_dir

    return _make


@pytest.fixture
def sample_edges():
    """Edges the sample project is expected to produce, as (source, target) pairs."""
    return {
        ("src/index.ts", "src/app.tsx"),
        ("src/index.ts", "src/utils/index.ts"),
        ("src/app.tsx", "src/styles/main.css"),
        ("src/app.tsx", "lib/format.js"),
        ("src/app.tsx", "config.json"),
        ("src/styles/main.css", "src/styles/base.css"),
    }
