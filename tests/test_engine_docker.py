"""Tests for the Docker engine client."""

import subprocess
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from zenlaunch.core.engine.docker import DockerEngine


class TestDockerEngineAvailability:
    """Test Docker availability detection."""

    @patch("zenlaunch.core.engine.docker.subprocess.run")
    def test_is_running(self, mock_run: MagicMock) -> None:
        mock_run.return_value = MagicMock(returncode=0)
        assert DockerEngine(probe_timeout=5.0).is_running() is True
        assert mock_run.call_args[0][0] == ["docker", "info"]
        assert mock_run.call_args.kwargs["timeout"] == 5.0

    @patch("zenlaunch.core.engine.docker.subprocess.run")
    def test_daemon_not_running(self, mock_run: MagicMock) -> None:
        mock_run.return_value = MagicMock(returncode=1)
        assert DockerEngine().is_running() is False

    @patch("zenlaunch.core.engine.docker.subprocess.run")
    def test_daemon_probe_timeout(self, mock_run: MagicMock) -> None:
        mock_run.side_effect = subprocess.TimeoutExpired(["docker", "info"], 10)
        assert DockerEngine().is_running() is False

    @patch("zenlaunch.core.engine.docker.subprocess.run")
    def test_client_missing(self, mock_run: MagicMock) -> None:
        mock_run.side_effect = FileNotFoundError(2, "No such file", "docker")
        assert DockerEngine().is_running() is False


class TestDockerEngineImages:
    @patch("zenlaunch.core.engine.docker.subprocess.run")
    def test_image_exists(self, mock_run: MagicMock) -> None:
        mock_run.return_value = MagicMock(returncode=0, stdout="[]", stderr="")
        assert DockerEngine().image_exists("zen-mcp-server:latest") is True
        assert mock_run.call_args[0][0] == [
            "docker",
            "image",
            "inspect",
            "zen-mcp-server:latest",
        ]

    @patch("zenlaunch.core.engine.docker.subprocess.run")
    def test_image_missing(self, mock_run: MagicMock) -> None:
        mock_run.return_value = MagicMock(returncode=1, stdout="", stderr="No such image")
        assert DockerEngine().image_exists("zen-mcp-server:latest") is False

    @patch("zenlaunch.core.engine.docker.subprocess.run")
    def test_build_image(self, mock_run: MagicMock, tmp_path: Path) -> None:
        DockerEngine().build_image("zen-mcp-server:latest", tmp_path)
        assert mock_run.call_args[0][0] == ["docker", "build", "-t", "zen-mcp-server:latest", "."]
        assert mock_run.call_args.kwargs["cwd"] == tmp_path
        assert mock_run.call_args.kwargs["check"] is True

    @patch("zenlaunch.core.engine.docker.subprocess.run")
    def test_build_failure_raises(self, mock_run: MagicMock, tmp_path: Path) -> None:
        mock_run.side_effect = subprocess.CalledProcessError(1, ["docker", "build"])
        with pytest.raises(subprocess.CalledProcessError):
            DockerEngine().build_image("zen-mcp-server:latest", tmp_path)


class TestDockerEngineContainers:
    @patch("zenlaunch.core.engine.docker.subprocess.run")
    def test_container_running(self, mock_run: MagicMock) -> None:
        mock_run.return_value = MagicMock(returncode=0, stdout="zen-mcp-server\n", stderr="")
        assert DockerEngine().container_running("zen-mcp-server") is True
        args = mock_run.call_args[0][0]
        assert "name=^zen-mcp-server$" in args

    @patch("zenlaunch.core.engine.docker.subprocess.run")
    def test_container_not_running(self, mock_run: MagicMock) -> None:
        mock_run.return_value = MagicMock(returncode=0, stdout="", stderr="")
        assert DockerEngine().container_running("zen-mcp-server") is False

    @patch("zenlaunch.core.engine.docker.subprocess.run")
    def test_similar_name_does_not_match(self, mock_run: MagicMock) -> None:
        mock_run.return_value = MagicMock(returncode=0, stdout="zen-mcp-server-old\n", stderr="")
        assert DockerEngine().container_running("zen-mcp-server") is False

    @patch("zenlaunch.core.engine.docker.subprocess.run")
    def test_compose_up(self, mock_run: MagicMock, tmp_path: Path) -> None:
        DockerEngine().compose_up(tmp_path)
        assert mock_run.call_args[0][0] == ["docker", "compose", "up", "-d"]
        assert mock_run.call_args.kwargs["cwd"] == tmp_path

    def test_exec_argv(self) -> None:
        argv = DockerEngine().exec_argv("zen-mcp-server", ["python", "server.py", "--debug"])
        assert argv == ["docker", "exec", "-i", "zen-mcp-server", "python", "server.py", "--debug"]

    def test_custom_binary(self) -> None:
        engine = DockerEngine(binary="podman")
        assert engine.binary == "podman"
        assert engine.exec_argv("c", ["x"])[0] == "podman"


class TestDockerEngineVersion:
    @patch("zenlaunch.core.engine.docker.subprocess.run")
    def test_get_version(self, mock_run: MagicMock) -> None:
        mock_run.return_value = MagicMock(returncode=0, stdout="24.0.7\n", stderr="")
        assert DockerEngine().get_version() == "24.0.7"

    @patch("zenlaunch.core.engine.docker.subprocess.run")
    def test_get_version_daemon_down(self, mock_run: MagicMock) -> None:
        mock_run.return_value = MagicMock(returncode=1, stdout="", stderr="Cannot connect")
        assert DockerEngine().get_version() == "unknown"
