"""
Dependency resolution for native mode (import check, venv, pip install).
"""

from zenlaunch.core.deps.models import DependencyStatus
from zenlaunch.core.deps.resolver import DependencyResolver, venv_bin

__all__ = ["DependencyResolver", "DependencyStatus", "venv_bin"]
