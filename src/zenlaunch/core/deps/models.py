"""
Data models for dependency resolution.
"""

from enum import Enum


class DependencyStatus(str, Enum):
    """Outcome of checking the required modules."""

    SATISFIED = "satisfied"
    MISSING = "missing"


__all__ = ["DependencyStatus"]
