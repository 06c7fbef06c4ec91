"""Shared test fixtures for merkle-dag."""

from pathlib import Path

import pytest
from click.testing import CliRunner

from merkle_dag import MDAG_DIR
from merkle_dag.config import MdagConfig, save_config
from merkle_dag.manifest import create_empty_manifest, save_manifest
from merkle_dag.store import MemoryStore


@pytest.fixture
def cli_runner():
    """Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def memory_store() -> MemoryStore:
    """An empty in-memory store."""
    return MemoryStore()


@pytest.fixture
def sample_tree(tmp_path: Path) -> Path:
    """
    Create a small directory tree on disk.

    Structure:
        sample/
        ├── a.txt        "A"
        ├── b.txt        "B"
        ├── docs/
        │   └── readme.md
        └── __pycache__/
            └── cached.pyc  (excluded by default)
    """
    root = tmp_path / "sample"
    root.mkdir()
    (root / "a.txt").write_bytes(b"A")
    (root / "b.txt").write_bytes(b"B")

    docs = root / "docs"
    docs.mkdir()
    (docs / "readme.md").write_bytes(b"# Sample\n")

    cache = root / "__pycache__"
    cache.mkdir()
    (cache / "cached.pyc").write_bytes(b"\x00\x01")

    return root


def setup_mdag_project(project_root: Path, config: MdagConfig | None = None) -> MdagConfig:
    """Initialize an mdag project at the given path without going through the CLI."""
    if config is None:
        config = MdagConfig()

    (project_root / MDAG_DIR).mkdir(parents=True, exist_ok=True)
    save_config(config, project_root)
    save_manifest(create_empty_manifest(), project_root)

    return config


@pytest.fixture
def initialized_project(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """A temporary project with mdag initialized, used as the working directory."""
    setup_mdag_project(tmp_path)
    monkeypatch.chdir(tmp_path)
    return tmp_path
