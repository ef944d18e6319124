"""Filesystem policy configuration.

The policy holds the constants every filesystem component is built with:
the extensions skipped by data-only copies, the access-deny marker, the
permission modes used when hardening directories, and the filesystem types
considered remote by the probe.

Configuration is stored in ~/.config/installfs/policy.toml
"""

import logging
import os
import tomllib
from pathlib import Path
from tempfile import NamedTemporaryFile
from typing import Annotated

import tomli_w
from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    ValidationInfo,
    field_validator,
)

from installfs.core.paths import get_policy_path

logger = logging.getLogger(__name__)

# Extensions of application logic files that data-only deployments leave alone
DEFAULT_EXCLUDED_EXTENSIONS: frozenset[str] = frozenset({"php", "tpl", "twig"})

DEFAULT_ACCESS_MARKER_NAME = ".htaccess"

# Apache deny-all block covering mod_access, mod_authz_host and mod_access_compat
DEFAULT_ACCESS_MARKER_CONTENT = (
    '<Files "*">\n'
    "<IfModule mod_access.c>\n"
    "Deny from all\n"
    "</IfModule>\n"
    "<IfModule !mod_access_compat>\n"
    "<IfModule mod_authz_host.c>\n"
    "Deny from all\n"
    "</IfModule>\n"
    "</IfModule>\n"
    "<IfModule mod_access_compat>\n"
    "Deny from all\n"
    "</IfModule>\n"
    "</Files>\n"
)

DEFAULT_NETWORK_FILESYSTEM_TYPES: tuple[str, ...] = ("nfs", "nfs4")

_WORLD_WRITABLE = 0o002


def _parse_mode(value: object) -> int:
    """Accept permission modes as ints or octal strings ("0755", "0o755")."""
    if isinstance(value, bool):
        raise ValueError("mode must be an integer or an octal string")
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value.strip().removeprefix("0o"), 8)
        except ValueError:
            raise ValueError(f"invalid octal mode '{value}'") from None
    raise ValueError("mode must be an integer or an octal string")


class FilesystemPolicy(BaseModel):
    """Immutable settings injected into the filesystem components.

    Attributes:
        excluded_extensions: Extensions copy_file skips when exclusion is on.
        access_marker_name: File name of the access-deny marker.
        access_marker_content: Content written into new access-deny markers.
        write_access_markers: Whether the web server honors access markers
            (Apache). When False no marker is ever written.
        directory_mode: First permission escalation for unwritable directories.
        directory_fallback_mode: Second and last escalation step.
        file_retry_mode: Mode applied to a destination file before retrying a copy.
        network_filesystem_types: Filesystem types reported as remote by the probe.
        probe_timeout_seconds: Timeout for the probe command (None waits forever).
        cache_dirs: Directories emptied when caches are invalidated after an update.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    excluded_extensions: Annotated[
        frozenset[str],
        Field(description="Extensions skipped by data-only copies"),
    ] = DEFAULT_EXCLUDED_EXTENSIONS
    access_marker_name: Annotated[
        str,
        Field(min_length=1, description="Access-deny marker file name"),
    ] = DEFAULT_ACCESS_MARKER_NAME
    access_marker_content: str = DEFAULT_ACCESS_MARKER_CONTENT
    write_access_markers: bool = True
    directory_mode: int = 0o755
    directory_fallback_mode: int = 0o775
    file_retry_mode: int = 0o755
    network_filesystem_types: Annotated[
        tuple[str, ...],
        Field(min_length=1, description="Filesystem types treated as network mounts"),
    ] = DEFAULT_NETWORK_FILESYSTEM_TYPES
    probe_timeout_seconds: Annotated[float, Field(gt=0)] | None = None
    cache_dirs: tuple[str, ...] = ()

    @field_validator("excluded_extensions", mode="before")
    @classmethod
    def normalize_extensions(cls, v: object) -> object:
        """Strip leading dots so ".php" and "php" mean the same thing."""
        if isinstance(v, (list, tuple, set, frozenset)):
            return frozenset(str(ext).lstrip(".") for ext in v)
        return v

    @field_validator("access_marker_name")
    @classmethod
    def validate_marker_name(cls, v: str) -> str:
        """The marker must be a plain file name inside the guarded directory."""
        if "/" in v or v in (".", ".."):
            raise ValueError("access_marker_name must be a plain file name")
        return v

    @field_validator("directory_mode", "directory_fallback_mode", "file_retry_mode", mode="before")
    @classmethod
    def validate_mode(cls, v: object, info: ValidationInfo) -> int:
        """Modes must fit in 0o777 and must never grant world write access."""
        mode = _parse_mode(v)
        field_name = info.field_name
        if not 0 <= mode <= 0o777:
            raise ValueError(f"{field_name}: mode {mode:o} out of range")
        if mode & _WORLD_WRITABLE:
            raise ValueError(f"{field_name}: world-writable mode {mode:04o} is not allowed")
        return mode

    @field_validator("cache_dirs")
    @classmethod
    def strip_trailing_slashes(cls, v: tuple[str, ...]) -> tuple[str, ...]:
        """Directory paths are stored without trailing slash."""
        return tuple(d.rstrip("/") or "/" for d in v)


class PolicyError(Exception):
    """Base exception for policy configuration errors."""


class PolicyNotFoundError(PolicyError):
    """Raised when the policy file is not found."""


class PolicyParseError(PolicyError):
    """Raised when the policy file cannot be parsed."""


def load_policy(path: Path | None = None) -> FilesystemPolicy:
    """Load the filesystem policy from a TOML file.

    Args:
        path: Path to the policy file. If None, uses the default policy path.

    Returns:
        Validated FilesystemPolicy object.

    Raises:
        PolicyNotFoundError: If the policy file doesn't exist.
        PolicyParseError: If the TOML syntax is invalid.
        PolicyError: If the content doesn't match the schema.
    """
    policy_path = path or get_policy_path()

    if not policy_path.exists():
        raise PolicyNotFoundError(f"Policy file not found: {policy_path}")

    try:
        with open(policy_path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise PolicyParseError(f"Invalid TOML syntax: {e}") from e
    except OSError as e:
        raise PolicyError(f"Failed to read policy: {e}") from e

    try:
        return FilesystemPolicy.model_validate(data.get("policy", data))
    except (ValueError, ValidationError) as e:
        raise PolicyError(f"Invalid policy content: {e}") from e


def load_policy_or_default(path: Path | None = None) -> FilesystemPolicy:
    """Load the policy, falling back to defaults when no file exists.

    An explicitly given path must exist; only the default location may be
    absent.

    Raises:
        PolicyError: If the file exists but is invalid, or an explicit path is missing.
    """
    try:
        return load_policy(path)
    except PolicyNotFoundError:
        if path is not None:
            raise
        logger.debug("No policy file at %s, using defaults", get_policy_path())
        return FilesystemPolicy()


def save_policy(policy: FilesystemPolicy, path: Path | None = None) -> Path:
    """Save the filesystem policy to a TOML file.

    The file is written atomically by first writing to a temporary file
    and then using os.replace() for atomic rename.

    Args:
        policy: The FilesystemPolicy object to save.
        path: Path to save the policy. If None, uses the default policy path.

    Returns:
        Path where the policy was saved.

    Raises:
        PolicyError: If the file cannot be written.
    """
    policy_path = path or get_policy_path()

    tmp_path: Path | None = None
    try:
        policy_path.parent.mkdir(parents=True, exist_ok=True)
        with NamedTemporaryFile(
            mode="wb",
            dir=policy_path.parent,
            delete=False,
            suffix=".tmp",
        ) as f:
            tmp_path = Path(f.name)
            tomli_w.dump({"policy": policy_to_dict(policy)}, f)
        # os.replace() is atomic on POSIX
        os.replace(str(tmp_path), str(policy_path))
    except OSError as e:
        if tmp_path is not None and tmp_path.exists():
            tmp_path.unlink()
        raise PolicyError(f"Failed to write policy: {e}") from e

    return policy_path


def policy_to_dict(policy: FilesystemPolicy) -> dict[str, object]:
    """Convert a policy to a TOML-serializable dictionary.

    Modes are written as octal strings and the optional timeout is omitted
    when unset.
    """
    result: dict[str, object] = {
        "excluded_extensions": sorted(policy.excluded_extensions),
        "access_marker_name": policy.access_marker_name,
        "access_marker_content": policy.access_marker_content,
        "write_access_markers": policy.write_access_markers,
        "directory_mode": f"{policy.directory_mode:04o}",
        "directory_fallback_mode": f"{policy.directory_fallback_mode:04o}",
        "file_retry_mode": f"{policy.file_retry_mode:04o}",
        "network_filesystem_types": list(policy.network_filesystem_types),
        "cache_dirs": list(policy.cache_dirs),
    }
    if policy.probe_timeout_seconds is not None:
        result["probe_timeout_seconds"] = policy.probe_timeout_seconds
    return result
