"""
Tests for native-mode dependency resolution.
"""

import subprocess
from pathlib import Path
from unittest.mock import MagicMock, patch

from zenlaunch.core.config.models import NativeConfig
from zenlaunch.core.deps import DependencyResolver, DependencyStatus, venv_bin


def _resolver(workspace: Path, **overrides) -> DependencyResolver:
    return DependencyResolver(
        workspace, "python3", NativeConfig(**overrides), platform="linux"
    )


def _make_venv(workspace: Path) -> None:
    (workspace / "venv" / "bin").mkdir(parents=True)
    (workspace / "venv" / "bin" / "python").touch()


class TestVenvBin:
    def test_posix(self) -> None:
        assert venv_bin(Path("/w/venv"), "python", platform="linux") == Path("/w/venv/bin/python")

    def test_windows(self) -> None:
        assert venv_bin(Path("/w/venv"), "pip", platform="win32") == Path("/w/venv/Scripts/pip")


class TestInterpreter:
    def test_host_python_without_venv(self, workspace: Path) -> None:
        assert _resolver(workspace).interpreter() == "python3"

    def test_venv_python_once_venv_exists(self, workspace: Path) -> None:
        _make_venv(workspace)
        assert _resolver(workspace).interpreter() == str(workspace / "venv" / "bin" / "python")

    def test_host_python_when_venv_has_no_interpreter(self, workspace: Path) -> None:
        (workspace / "venv" / "bin").mkdir(parents=True)
        assert _resolver(workspace).interpreter() == "python3"


class TestCheckDependencies:
    @patch("zenlaunch.core.deps.resolver.subprocess.run")
    def test_satisfied(self, mock_run: MagicMock, workspace: Path) -> None:
        mock_run.return_value = MagicMock(returncode=0)
        assert _resolver(workspace).check_dependencies() == DependencyStatus.SATISFIED

        args = mock_run.call_args[0][0]
        assert args == ["python3", "-c", "import mcp, google.genai, openai, pydantic"]

    @patch("zenlaunch.core.deps.resolver.subprocess.run")
    def test_missing(self, mock_run: MagicMock, workspace: Path) -> None:
        mock_run.return_value = MagicMock(returncode=1)
        assert _resolver(workspace).check_dependencies() == DependencyStatus.MISSING

    @patch("zenlaunch.core.deps.resolver.subprocess.run")
    def test_interpreter_vanished(self, mock_run: MagicMock, workspace: Path) -> None:
        mock_run.side_effect = FileNotFoundError(2, "No such file", "python3")
        assert _resolver(workspace).check_dependencies() == DependencyStatus.MISSING


class TestInstallDependencies:
    """Test venv creation and pip install."""

    @patch("zenlaunch.core.deps.resolver.subprocess.run")
    def test_creates_venv_then_installs(self, mock_run: MagicMock, workspace: Path) -> None:
        mock_run.return_value = MagicMock(returncode=0)

        assert _resolver(workspace).install_dependencies() is True

        commands = [c[0][0] for c in mock_run.call_args_list]
        assert commands[0] == ["python3", "-m", "venv", str(workspace / "venv")]
        assert commands[1] == [
            str(workspace / "venv" / "bin" / "pip"),
            "install",
            "-r",
            str(workspace / "requirements.txt"),
        ]

    @patch("zenlaunch.core.deps.resolver.subprocess.run")
    def test_existing_venv_is_reused(self, mock_run: MagicMock, workspace: Path) -> None:
        _make_venv(workspace)
        mock_run.return_value = MagicMock(returncode=0)

        assert _resolver(workspace).install_dependencies() is True
        assert mock_run.call_count == 1
        assert mock_run.call_args[0][0][1] == "install"

    @patch("zenlaunch.core.deps.resolver.subprocess.run")
    def test_interrupted_venv_is_recreated(self, mock_run: MagicMock, workspace: Path) -> None:
        """Test that a venv directory without an interpreter is rebuilt, not reused."""
        (workspace / "venv").mkdir()
        mock_run.return_value = MagicMock(returncode=0)

        assert _resolver(workspace).install_dependencies() is True

        commands = [c[0][0] for c in mock_run.call_args_list]
        assert commands[0] == ["python3", "-m", "venv", "--clear", str(workspace / "venv")]
        assert commands[1][:2] == [str(workspace / "venv" / "bin" / "pip"), "install"]

    @patch("zenlaunch.core.deps.resolver.subprocess.run")
    def test_ensure_venv_skips_complete_venv(self, mock_run: MagicMock, workspace: Path) -> None:
        _make_venv(workspace)
        assert _resolver(workspace).ensure_venv() is False
        mock_run.assert_not_called()

    @patch("zenlaunch.core.deps.resolver.subprocess.run")
    def test_pip_failure_reported_not_raised(self, mock_run: MagicMock, workspace: Path) -> None:
        _make_venv(workspace)
        mock_run.side_effect = subprocess.CalledProcessError(1, ["pip"])
        assert _resolver(workspace).install_dependencies() is False

    @patch("zenlaunch.core.deps.resolver.subprocess.run")
    def test_venv_failure_reported_not_raised(self, mock_run: MagicMock, workspace: Path) -> None:
        mock_run.side_effect = subprocess.CalledProcessError(1, ["python3", "-m", "venv"])
        assert _resolver(workspace).install_dependencies() is False

    @patch("zenlaunch.core.deps.resolver.subprocess.run")
    def test_missing_manifest(self, mock_run: MagicMock, workspace: Path) -> None:
        (workspace / "requirements.txt").unlink()
        assert _resolver(workspace).install_dependencies() is False
        mock_run.assert_not_called()

    def test_manual_instructions(self, workspace: Path) -> None:
        steps = _resolver(workspace).manual_instructions()
        assert steps == [f"cd {workspace}", "python3 -m pip install -r requirements.txt"]
