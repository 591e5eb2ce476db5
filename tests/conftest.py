"""
Pytest configuration and shared fixtures.

Provides temp workspaces, a scripted tool prober, and a fake sleep that
records requested delays instead of blocking.
"""

import subprocess
from collections.abc import Callable
from pathlib import Path

import pytest

from zenlaunch.core.config.models import LauncherConfig, WorkspaceConfig
from zenlaunch.core.prereq.prober import ToolProber

# ==============================================================================
# Directory Fixtures
# ==============================================================================


@pytest.fixture
def workspace(tmp_path: Path) -> Path:
    """
    Provide an already-cloned workspace.

    Creates:
    - server.py
    - requirements.txt
    - .env.example
    """
    ws = tmp_path / "zen-mcp-server"
    ws.mkdir()
    (ws / "server.py").write_text("print('zen')\n")
    (ws / "requirements.txt").write_text("mcp\nopenai\n")
    (ws / ".env.example").write_text("GEMINI_API_KEY=\nOPENAI_API_KEY=\n")
    return ws


@pytest.fixture
def configured_workspace(workspace: Path) -> Path:
    """Workspace whose .env already holds a credential."""
    (workspace / ".env").write_text("GEMINI_API_KEY=file-key\nLOG_LEVEL=INFO\n")
    return workspace


@pytest.fixture
def config(workspace: Path) -> LauncherConfig:
    """Launcher config pointing at the temp workspace."""
    return LauncherConfig(workspace=WorkspaceConfig(local_dir=str(workspace)))


# ==============================================================================
# Fakes
# ==============================================================================


class ScriptedRunner:
    """
    Stand-in for subprocess.run used by ToolProber.

    Tools mapped to a string print it as their version; tools mapped to
    None (or not mapped at all) are not installed.
    """

    def __init__(self, tools: dict[str, str | None]) -> None:
        self.tools = tools
        self.calls: list[list[str]] = []

    def __call__(self, cmd: list[str], **kwargs: object) -> subprocess.CompletedProcess[str]:
        self.calls.append(list(cmd))
        output = self.tools.get(cmd[0])
        if output is None:
            raise FileNotFoundError(2, "No such file or directory", cmd[0])
        return subprocess.CompletedProcess(cmd, 0, stdout=output + "\n", stderr="")


@pytest.fixture
def make_prober() -> Callable[..., ToolProber]:
    """
    Factory for probers with scripted tools.

    Example:
        prober = make_prober(git="git version 2.43.0", python3="Python 3.12.1")
    """

    def _make(**tools: str | None) -> ToolProber:
        return ToolProber(runner=ScriptedRunner(tools))

    return _make


class FakeSleep:
    """Records sleep requests without blocking."""

    def __init__(self) -> None:
        self.calls: list[float] = []

    def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)

    @property
    def total(self) -> float:
        return sum(self.calls)


@pytest.fixture
def fake_sleep() -> FakeSleep:
    return FakeSleep()
