"""Unit tests for path helpers."""

import os
from pathlib import Path
from unittest.mock import patch

import pytest
from installfs.core.paths import (
    APP_NAME,
    APP_ROOT_ENV,
    canonicalize,
    get_app_root,
    get_config_dir,
    get_policy_path,
    is_valid_filename,
)


class TestCanonicalize:
    """Tests for canonicalize function."""

    def test_existing_path_is_resolved(self, tmp_path: Path) -> None:
        """Existing paths are returned in canonical absolute form."""
        target = tmp_path / "dir"
        target.mkdir()
        messy = f"{tmp_path}/dir/../dir/."

        assert canonicalize(messy) == os.path.realpath(target)

    def test_symlink_is_resolved(self, tmp_path: Path) -> None:
        """Symlinks resolve to their target."""
        target = tmp_path / "real"
        target.mkdir()
        link = tmp_path / "link"
        link.symlink_to(target)

        assert canonicalize(str(link)) == os.path.realpath(target)

    def test_missing_path_passes_through(self, tmp_path: Path) -> None:
        """Non-existent paths are returned unchanged."""
        missing = f"{tmp_path}/nope/../still-nope"

        assert canonicalize(missing) == missing

    def test_relative_missing_path_unchanged(self) -> None:
        """Relative paths that do not exist are not made absolute."""
        assert canonicalize("does/not/exist_xyz") == "does/not/exist_xyz"


class TestGetAppRoot:
    """Tests for get_app_root function."""

    def test_default_root_holds_package(self) -> None:
        """Without override the root is the directory containing installfs."""
        with patch.dict(os.environ, {}, clear=False):
            os.environ.pop(APP_ROOT_ENV, None)
            root = get_app_root()

        assert os.path.isdir(os.path.join(root, "installfs"))
        assert not root.endswith("/")

    def test_env_override(self, tmp_path: Path) -> None:
        """INSTALLFS_APP_ROOT overrides the root, canonicalized."""
        with patch.dict(os.environ, {APP_ROOT_ENV: f"{tmp_path}/"}):
            root = get_app_root()

        assert root == os.path.realpath(tmp_path)


class TestIsValidFilename:
    """Tests for is_valid_filename function."""

    @pytest.mark.parametrize(
        "name",
        ["index.php", "a", "0", "plugin-name_1.2.tar.gz", "Config.ini.php"],
    )
    def test_valid_names(self, name: str) -> None:
        """Names starting with an alphanumeric character are accepted."""
        assert is_valid_filename(name) is True

    @pytest.mark.parametrize(
        "name",
        [".htaccess", "", "-rf", "_private", "with space.txt", "a/b", "name\n", "ümlaut"],
    )
    def test_invalid_names(self, name: str) -> None:
        """Dotfiles, separators, spaces and non-ASCII names are rejected."""
        assert is_valid_filename(name) is False


class TestPolicyPath:
    """Tests for policy file location."""

    def test_respects_xdg_config_home(self, tmp_path: Path) -> None:
        """get_config_dir respects XDG_CONFIG_HOME environment variable."""
        with patch.dict(os.environ, {"XDG_CONFIG_HOME": str(tmp_path)}):
            assert get_config_dir() == tmp_path / APP_NAME
            assert get_policy_path() == tmp_path / APP_NAME / "policy.toml"

    def test_default_config_dir(self) -> None:
        """get_config_dir falls back to ~/.config."""
        with patch.dict(os.environ, {}, clear=False):
            os.environ.pop("XDG_CONFIG_HOME", None)
            result = get_config_dir()

        assert result == Path.home() / ".config" / APP_NAME
