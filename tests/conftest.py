"""Shared fixtures for envscan tests."""

from pathlib import Path

import pytest

from tests.scan_test_utils import write_tree


@pytest.fixture
def make_tree(tmp_path):
    """Return a function that builds a file tree inside tmp_path."""

    def _make_tree(files: dict[str, str | bytes]) -> Path:
        return write_tree(tmp_path, files)

    return _make_tree
