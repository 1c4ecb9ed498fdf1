"""Shared fixtures for orchestrator tests."""

import os

import pytest


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    """Run from an empty directory with no DOCMODEL_* variables set."""
    for name in list(os.environ):
        if name.startswith("DOCMODEL_"):
            monkeypatch.delenv(name)
    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture
def view_root(tmp_path):
    """A source root holding post/by_author/map.js."""
    root = tmp_path / "app"
    directory = root / "post" / "by_author"
    directory.mkdir(parents=True)
    path = directory / "map.js"
    path.write_text("function(doc, meta) { emit(doc.author, null); }\n")
    os.utime(path, (1_000, 1_000))
    return root
