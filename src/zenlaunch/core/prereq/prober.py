"""
Prerequisite prober.

Checks whether a named external tool is installed and, optionally, whether
its reported version satisfies a minimum. Probing never mutates anything;
results are memoised on the prober instance so one invocation asks each
tool at most once.
"""

from __future__ import annotations

import logging
import re
import subprocess
from collections.abc import Callable, Sequence

from zenlaunch.core.prereq.models import ToolProbe, ToolStatus

logger = logging.getLogger(__name__)

VERSION_RE = re.compile(r"(\d+)\.(\d+)(?:\.(\d+))?")

Runner = Callable[..., "subprocess.CompletedProcess[str]"]


def parse_version(text: str) -> tuple[int, ...] | None:
    """
    Extract the first major.minor[.patch] version from tool output.

    Examples:
        >>> parse_version("Python 3.11.4")
        (3, 11, 4)
        >>> parse_version("git version 2.39.2 (Apple Git-143)")
        (2, 39, 2)
        >>> parse_version("docker: nightly build") is None
        True
    """
    match = VERSION_RE.search(text)
    if not match:
        return None
    return tuple(int(part) for part in match.groups() if part is not None)


class ToolProber:
    """
    Probes external tools by running their version command.

    Example:
        >>> prober = ToolProber()
        >>> git = prober.probe("git")
        >>> if not git.present:
        ...     print("install git")
    """

    def __init__(self, runner: Runner | None = None, timeout: float = 15.0) -> None:
        self._runner = runner or subprocess.run
        self._timeout = timeout
        self._cache: dict[tuple[str, tuple[str, ...], tuple[int, ...] | None], ToolProbe] = {}

    def probe(
        self,
        name: str,
        version_args: Sequence[str] = ("--version",),
        minimum: tuple[int, ...] | None = None,
    ) -> ToolProbe:
        """
        Probe a tool.

        Args:
            name: Command to run
            version_args: Arguments that make the tool print its version
            minimum: Optional minimum version tuple

        Returns:
            ToolProbe describing presence and version
        """
        key = (name, tuple(version_args), minimum)
        if key not in self._cache:
            self._cache[key] = self._probe(name, list(version_args), minimum)
        return self._cache[key]

    def _probe(
        self,
        name: str,
        version_args: list[str],
        minimum: tuple[int, ...] | None,
    ) -> ToolProbe:
        try:
            result = self._runner(
                [name, *version_args],
                capture_output=True,
                text=True,
                timeout=self._timeout,
                check=False,
            )
        except (OSError, subprocess.SubprocessError) as e:
            logger.debug("Probe of %s failed: %s", name, e)
            return ToolProbe(name=name, status=ToolStatus.ABSENT)

        if result.returncode != 0:
            logger.debug("Probe of %s exited with %d", name, result.returncode)
            return ToolProbe(name=name, status=ToolStatus.ABSENT)

        # Python 2 and some other tools print their version on stderr
        output = (result.stdout or "").strip() or (result.stderr or "").strip()
        raw = output.splitlines()[0] if output else None
        version = parse_version(output)

        satisfies: bool | None = None
        if minimum is not None:
            satisfies = True if version is None else version >= minimum

        logger.debug("Probe of %s: %s", name, raw)
        return ToolProbe(
            name=name,
            status=ToolStatus.PRESENT,
            version=version,
            raw_version=raw,
            satisfies_minimum=satisfies,
        )


def find_python(
    prober: ToolProber,
    candidates: Sequence[str],
    minimum: tuple[int, ...] | None = None,
) -> ToolProbe | None:
    """
    Find the first working Python interpreter among ``candidates``.

    Candidates that report a major version other than 3 are skipped.

    Returns:
        ToolProbe of the chosen interpreter, or None if none is usable
    """
    for command in candidates:
        probe = prober.probe(command, minimum=minimum)
        if not probe.present:
            continue
        if probe.version is not None and probe.version[0] != 3:
            logger.debug("Skipping %s: reports Python %s", command, probe.version_string)
            continue
        return probe
    return None


__all__ = ["ToolProber", "find_python", "parse_version"]
