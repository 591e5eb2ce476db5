"""
Exception taxonomy for the launcher.

Every fatal condition is raised as a LauncherError subclass carrying a
human-readable problem and the instructions that fix it. The CLI turns
these into a diagnostic on stderr and exit code 1; core code never exits
the process itself.
"""

from __future__ import annotations

from pathlib import Path


class LauncherError(Exception):
    """Base exception for fatal launcher errors."""

    def __init__(
        self,
        problem: str,
        *,
        reason: str | None = None,
        solution: list[str] | None = None,
    ) -> None:
        self.problem = problem
        self.reason = reason
        self.solution = solution or []
        super().__init__(problem)


class ConfigError(LauncherError):
    """Launcher configuration failed validation."""

    def __init__(self, problem: str, *, source: Path | None = None) -> None:
        self.source = source
        solution = [f"Fix or remove {source}"] if source is not None else None
        super().__init__(problem, solution=solution)


class MissingPrerequisiteError(LauncherError):
    """A mandatory external tool is not installed or not usable."""

    def __init__(
        self,
        tool: str,
        *,
        reason: str | None = None,
        solution: list[str] | None = None,
    ) -> None:
        self.tool = tool
        super().__init__(f"{tool} is not installed", reason=reason, solution=solution)


class ProvisioningError(LauncherError):
    """A workspace, image or container provisioning step failed."""


class ConfigCreatedError(ProvisioningError):
    """The config file was just seeded from its template and needs secrets."""

    def __init__(self, env_file: Path, required_keys: list[str]) -> None:
        self.env_file = env_file
        self.required_keys = required_keys
        super().__init__(
            f"Created {env_file.name} file. Please configure your API keys:",
            reason=(
                f"  {env_file}\n\nYou need at least one of:\n"
                + "\n".join(f"  - {key}" for key in required_keys)
            ),
            solution=["Then run this command again."],
        )


class ReadinessTimeoutError(LauncherError):
    """The container engine never became ready within the attempt budget."""

    def __init__(self, attempts: int, *, solution: list[str] | None = None) -> None:
        self.attempts = attempts
        super().__init__(
            f"Docker did not become ready after {attempts} attempts",
            solution=solution,
        )


class SpawnError(LauncherError):
    """The supervised process could not be created."""

    def __init__(self, command: str, error: OSError) -> None:
        self.command = command
        self.error = error
        super().__init__(
            f"Failed to execute Zen MCP Server: {error.strerror or error}",
            reason=f"Command: {command}",
        )


__all__ = [
    "LauncherError",
    "ConfigError",
    "MissingPrerequisiteError",
    "ProvisioningError",
    "ConfigCreatedError",
    "ReadinessTimeoutError",
    "SpawnError",
]
