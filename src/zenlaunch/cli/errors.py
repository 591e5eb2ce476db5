"""
Standardized error handling and exit codes for the launcher CLI.

Everything here prints to stderr: stdout belongs to the MCP server once it
is running, so the launcher never writes to it.
"""

from enum import IntEnum

from rich.console import Console
from rich.text import Text

from zenlaunch.core.errors import LauncherError

console = Console(stderr=True)


class ExitCode(IntEnum):
    """Standard exit codes for the launcher."""

    SUCCESS = 0
    """Server exited cleanly (or was shut down by a forwarded signal)."""

    FAILURE = 1
    """A prerequisite or provisioning step failed."""


def print_error(
    problem: str,
    *,
    reason: str | None = None,
    solution: list[str] | str | None = None,
) -> None:
    """
    Print a standardized error message with actionable guidance.

    Args:
        problem: Brief description of what went wrong
        reason: Optional explanation of why it happened
        solution: Optional command(s) or action(s) to fix it

    Example:
        >>> print_error(
        ...     "Git is not installed",
        ...     reason="Git is needed to download the Zen MCP Server",
        ...     solution=["macOS: brew install git"],
        ... )
    """
    console.print(Text.assemble(("Error:", "red"), " ", problem))

    if reason:
        console.print(Text(reason, style="dim"))

    if isinstance(solution, str):
        solution = [solution]
    if solution:
        console.print("[cyan]→ Try:[/cyan]")
        for step in solution:
            console.print(f"  {step}", highlight=False, markup=False)


def print_warning(
    problem: str,
    *,
    reason: str | None = None,
    solution: list[str] | None = None,
) -> None:
    """Print a non-fatal warning; the launch continues."""
    console.print(Text.assemble(("Warning:", "yellow"), " ", problem))
    if reason:
        console.print(Text(reason, style="dim"))
    for step in solution or []:
        console.print(f"  {step}", highlight=False, markup=False)


def print_launcher_error(error: LauncherError) -> None:
    """Render a LauncherError raised by the core."""
    print_error(error.problem, reason=error.reason, solution=error.solution)


__all__ = [
    "ExitCode",
    "console",
    "print_error",
    "print_launcher_error",
    "print_warning",
]
