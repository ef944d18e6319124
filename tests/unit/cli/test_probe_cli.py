"""Unit tests for probe CLI commands."""

import os
from pathlib import Path
from unittest.mock import MagicMock, patch

from installfs.cli.main import app
from typer.testing import CliRunner

runner = CliRunner()


class TestProbeNfs:
    """Tests for installfs probe nfs."""

    def test_reports_network_filesystem(self, tmp_path: Path) -> None:
        """A network filesystem is reported as a warning."""
        with patch("installfs.cli.commands.probe.FilesystemTypeProbe") as mock_probe_class:
            mock_probe = MagicMock()
            mock_probe.is_network_filesystem.return_value = True
            mock_probe_class.return_value = mock_probe

            result = runner.invoke(
                app,
                ["probe", "nfs", "/var/sessions"],
                env={"XDG_CONFIG_HOME": str(tmp_path)},
            )

        assert result.exit_code == 0
        assert "network filesystem" in result.output
        mock_probe.is_network_filesystem.assert_called_once_with("/var/sessions")

    def test_reports_local_filesystem(self, tmp_path: Path) -> None:
        """A local filesystem is reported as info."""
        with patch("installfs.cli.commands.probe.FilesystemTypeProbe") as mock_probe_class:
            mock_probe_class.return_value.is_network_filesystem.return_value = False

            result = runner.invoke(
                app,
                ["probe", "nfs", "/tmp"],
                env={"XDG_CONFIG_HOME": str(tmp_path)},
            )

        assert result.exit_code == 0
        assert "not on a network filesystem" in result.stdout


class TestProbeRealpath:
    """Tests for installfs probe realpath."""

    def test_existing_path(self, tmp_path: Path) -> None:
        """Existing paths are printed canonicalized."""
        (tmp_path / "d").mkdir()

        result = runner.invoke(app, ["probe", "realpath", f"{tmp_path}/d/../d"])

        assert result.exit_code == 0
        assert result.stdout.strip() == os.path.realpath(tmp_path / "d")

    def test_missing_path(self) -> None:
        """Missing paths are printed unchanged."""
        result = runner.invoke(app, ["probe", "realpath", "no/such/path"])

        assert result.exit_code == 0
        assert result.stdout.strip() == "no/such/path"
