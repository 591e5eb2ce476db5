"""
Data models for prerequisite probing.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class ToolStatus(str, Enum):
    """Whether an external tool could be invoked."""

    PRESENT = "present"
    ABSENT = "absent"


@dataclass(frozen=True)
class ToolProbe:
    """
    Result of probing one external tool.

    Attributes:
        name: Command that was probed (e.g., "git", "python3")
        status: PRESENT if the version invocation succeeded
        version: Parsed version tuple, None when absent or unparsable
        raw_version: First line of the tool's version output
        satisfies_minimum: None when no minimum was requested; True when the
            version meets it or could not be parsed (permissive default)
    """

    name: str
    status: ToolStatus
    version: tuple[int, ...] | None = None
    raw_version: str | None = None
    satisfies_minimum: bool | None = None

    @property
    def present(self) -> bool:
        return self.status == ToolStatus.PRESENT

    @property
    def version_string(self) -> str:
        """Dotted version, or 'unknown' when it could not be parsed."""
        if self.version is None:
            return "unknown"
        return ".".join(str(part) for part in self.version)


__all__ = ["ToolStatus", "ToolProbe"]
