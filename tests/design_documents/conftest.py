"""Shared fixtures for design document tests."""

import os

import pytest


@pytest.fixture
def write_view(tmp_path):
    """
    Write a view source file and pin its mtime.
    
    write_view(root, "post", "by_author", "map", body, mtime=100)
    """
    def _write(root, document_id, view, kind, body, mtime=1_000):
        directory = tmp_path / root / document_id / view
        directory.mkdir(parents=True, exist_ok=True)
        path = directory / f"{kind}.js"
        path.write_text(body, encoding="utf-8")
        os.utime(path, (mtime, mtime))
        return path
    
    return _write
