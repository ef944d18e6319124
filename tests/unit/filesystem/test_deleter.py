"""Unit tests for RecursiveDeleter.

Tests full and contents-only deletion, symlink handling, and the
best-effort behaviour on failures.
"""

import os
from pathlib import Path
from unittest.mock import patch

from installfs.filesystem.deleter import RecursiveDeleter


def _build_tree(root: Path) -> None:
    """Create a small nested tree under root."""
    (root / "a" / "b" / "c").mkdir(parents=True)
    (root / "top.txt").write_text("t")
    (root / "a" / "one.txt").write_text("1")
    (root / "a" / "b" / "two.txt").write_text("2")
    (root / "a" / "b" / "c" / "three.txt").write_text("3")
    (root / "empty").mkdir()


class TestDeleteTree:
    """Tests for RecursiveDeleter.delete_tree."""

    def test_delete_root_removes_everything(self, tmp_path: Path) -> None:
        """delete_root=True removes all contents and the directory."""
        root = tmp_path / "tree"
        _build_tree(root)

        result = RecursiveDeleter().delete_tree(str(root), delete_root=True)

        assert not root.exists()
        assert result.success is True
        assert result.failed == []
        assert result.removed[-1] == str(root)

    def test_keep_root_leaves_empty_directory(self, tmp_path: Path) -> None:
        """delete_root=False empties the directory but keeps it."""
        root = tmp_path / "tree"
        _build_tree(root)

        result = RecursiveDeleter().delete_tree(str(root), delete_root=False)

        assert root.is_dir()
        assert list(root.iterdir()) == []
        assert result.success is True
        assert str(root) not in result.removed

    def test_children_removed_before_parents(self, tmp_path: Path) -> None:
        """Directories are removed only after their contents."""
        root = tmp_path / "tree"
        _build_tree(root)

        result = RecursiveDeleter().delete_tree(str(root), delete_root=True)

        removed = result.removed
        assert removed.index(f"{root}/a/b/c/three.txt") < removed.index(f"{root}/a/b/c")
        assert removed.index(f"{root}/a/b/c") < removed.index(f"{root}/a/b")
        assert removed.index(f"{root}/a/b") < removed.index(f"{root}/a")

    def test_missing_directory_is_noop(self, tmp_path: Path) -> None:
        """A directory that cannot be opened returns without raising."""
        result = RecursiveDeleter().delete_tree(str(tmp_path / "missing"), delete_root=True)

        assert result.success is False
        assert result.error is not None
        assert result.removed == []

    def test_symlinked_directory_is_not_followed(self, tmp_path: Path) -> None:
        """A symlink to a directory is unlinked; the target survives."""
        outside = tmp_path / "outside"
        outside.mkdir()
        (outside / "precious.txt").write_text("keep me")
        root = tmp_path / "tree"
        root.mkdir()
        (root / "link").symlink_to(outside, target_is_directory=True)

        RecursiveDeleter().delete_tree(str(root), delete_root=True)

        assert not root.exists()
        assert (outside / "precious.txt").read_text() == "keep me"

    def test_failures_are_collected(self, tmp_path: Path) -> None:
        """Removal failures are reported and the walk continues."""
        root = tmp_path / "tree"
        _build_tree(root)
        real_rmdir = os.rmdir

        def _rmdir(path: str) -> None:
            if path.endswith("/a/b"):
                raise OSError("busy")
            real_rmdir(path)

        with patch("installfs.filesystem.deleter.os.rmdir", side_effect=_rmdir):
            result = RecursiveDeleter().delete_tree(str(root), delete_root=True)

        assert result.success is False
        assert f"{root}/a/b" in result.failed
        # everything not blocked by the failure is still removed
        assert not (root / "top.txt").exists()
        assert not (root / "empty").exists()
        assert not (root / "a" / "b" / "two.txt").exists()
        assert (root / "a" / "b").is_dir()

    def test_deep_tree_does_not_hit_recursion_limit(self, tmp_path: Path) -> None:
        """Very deep trees are handled without recursion."""
        root = tmp_path / "deep"
        root.mkdir()
        current = str(root)
        # deeper than the default recursion limit, well below PATH_MAX
        for _ in range(1100):
            current = f"{current}/d"
            os.mkdir(current)

        result = RecursiveDeleter().delete_tree(str(root), delete_root=True)

        assert result.success is True
        assert not root.exists()
