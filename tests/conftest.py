"""Pytest configuration and shared fixtures.

This module contains fixtures used across all test modules.
"""

import sys
from pathlib import Path

import pytest


@pytest.hookimpl(wrapper=True, tryfirst=True)
def pytest_sessionfinish(session, exitstatus):
    """Let pytest's tmp_path cleanup remove the deep trees some tests build.

    ``shutil.rmtree`` recurses once per directory level on Python < 3.12, so
    the recursion limit is raised only for session teardown, after every
    test has run under the default limit.
    """
    limit = sys.getrecursionlimit()
    sys.setrecursionlimit(max(limit, 10000))
    try:
        return (yield)
    finally:
        sys.setrecursionlimit(limit)


@pytest.fixture
def source_tree(tmp_path: Path) -> Path:
    """A nested release tree with code and data files at several depths.

    Layout::

        latest/
            index.php
            README.md
            core/
                Filesystem.php
                data.json
                templates/
                    layout.twig
                    logo.png
    """
    root = tmp_path / "latest"
    templates = root / "core" / "templates"
    templates.mkdir(parents=True)
    (root / "index.php").write_text("<?php echo 1;")
    (root / "README.md").write_text("# readme")
    (root / "core" / "Filesystem.php").write_text("<?php class Filesystem {}")
    (root / "core" / "data.json").write_text('{"a": 1}')
    (templates / "layout.twig").write_text("{{ body }}")
    (templates / "logo.png").write_bytes(b"\x89PNG")
    return root
