"""Path helpers for installfs.

Canonicalization of user supplied paths, the application root used in
permission advice, filename validation, and the XDG-compliant location of
the policy file.
"""

import os
import re
from pathlib import Path

# Application identifier for directory naming
APP_NAME = "installfs"

# Environment override for the application root
APP_ROOT_ENV = "INSTALLFS_APP_ROOT"

_VALID_FILENAME = re.compile(r"[a-zA-Z0-9]+[a-zA-Z_0-9.-]*")


def canonicalize(path: str) -> str:
    """Return the canonical absolute form of a path if it exists.

    Paths that do not exist are passed through unchanged.

    Args:
        path: Path to canonicalize.

    Returns:
        Canonical absolute path, or the input path when it does not exist.
    """
    if os.path.exists(path):
        return os.path.realpath(path)
    return path


def get_app_root() -> str:
    """Get the root directory of the installed application.

    Respects INSTALLFS_APP_ROOT; otherwise the directory holding the
    installfs package is used.

    Returns:
        Canonical path without trailing slash.
    """
    override = os.environ.get(APP_ROOT_ENV)
    if override:
        return canonicalize(override.rstrip("/") or "/")
    return str(Path(__file__).resolve().parents[2])


def is_valid_filename(filename: str) -> bool:
    """Check whether a string is an acceptable filename.

    Names must start with a letter or digit and may only contain letters,
    digits, underscores, dots and dashes. Dotfiles such as .htaccess and
    names with spaces are rejected.

    Args:
        filename: Candidate file name (no directory part).

    Returns:
        True if the name is valid, False otherwise.
    """
    return _VALID_FILENAME.fullmatch(filename) is not None


def _get_xdg_dir(env_var: str, default_subdir: str) -> Path:
    """Get XDG directory respecting environment variable override.

    Args:
        env_var: XDG environment variable name (e.g., "XDG_CONFIG_HOME").
        default_subdir: Default subdirectory under home (e.g., ".config").

    Returns:
        Path to the application-specific directory.
    """
    base = os.environ.get(env_var)
    if base:
        return Path(base) / APP_NAME
    return Path.home() / default_subdir / APP_NAME


def get_config_dir() -> Path:
    """Get the configuration directory path.

    Returns:
        Path to ~/.config/installfs/ (or XDG_CONFIG_HOME/installfs/).
    """
    return _get_xdg_dir("XDG_CONFIG_HOME", ".config")


def get_policy_path() -> Path:
    """Get the default policy file path.

    Returns:
        Path to ~/.config/installfs/policy.toml.
    """
    return get_config_dir() / "policy.toml"
