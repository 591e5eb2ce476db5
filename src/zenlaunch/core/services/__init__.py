"""
Service layer: clean APIs over the core packages for the CLI.
"""

from zenlaunch.core.services.launch import LaunchService

__all__ = ["LaunchService"]
