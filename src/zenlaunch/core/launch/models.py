"""
Data models for launching and supervising the server.

Defines the execution mode, the immutable per-invocation context passed
through the launch stages, and the spec of the process to supervise.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from zenlaunch.core.config.models import LauncherConfig
from zenlaunch.core.prereq.prober import ToolProber


class ExecutionMode(str, Enum):
    """How the server is run. Chosen once per invocation."""

    CONTAINERIZED = "containerized"  # docker exec into the compose container
    NATIVE = "native"  # host interpreter, workspace venv

    @property
    def label(self) -> str:
        """Short name used in the banner."""
        return "Docker" if self is ExecutionMode.CONTAINERIZED else "Python"


@dataclass(frozen=True)
class LaunchContext:
    """
    Everything a launch stage needs, resolved once per invocation.

    Stages receive the context instead of reading process-wide state;
    `dataclasses.replace` produces the updated context once the Python
    interpreter has been probed.

    Attributes:
        config: Validated launcher configuration
        mode: Selected execution mode
        workspace: Resolved workspace path
        prober: Tool prober (memoises probe results for this run)
        python_cmd: Host interpreter command, set after probing (native mode)
        extra_args: Arguments passed through to the server
    """

    config: LauncherConfig
    mode: ExecutionMode
    workspace: Path
    prober: ToolProber
    python_cmd: str | None = None
    extra_args: tuple[str, ...] = ()


@dataclass(frozen=True)
class ProcessSpec:
    """
    The process to supervise.

    Attributes:
        argv: Command and arguments
        cwd: Working directory
        env: Complete environment for the child (None inherits the parent's)
    """

    argv: list[str]
    cwd: Path
    env: dict[str, str] | None = field(default=None, repr=False)

    @property
    def display(self) -> str:
        return " ".join(self.argv)


__all__ = [
    "ExecutionMode",
    "LaunchContext",
    "ProcessSpec",
]
