"""
Prerequisite probing for external tools (git, docker, python).

Modules:
    prober: ToolProber, find_python, version parsing
    models: ToolStatus, ToolProbe
"""

from zenlaunch.core.prereq.models import ToolProbe, ToolStatus
from zenlaunch.core.prereq.prober import ToolProber, find_python, parse_version

__all__ = [
    "ToolProber",
    "ToolProbe",
    "ToolStatus",
    "find_python",
    "parse_version",
]
