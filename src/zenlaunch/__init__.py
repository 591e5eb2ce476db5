"""
Zen Launcher - first-run provisioning and supervision for the Zen MCP Server.

Prepares a local checkout of the server (clone, config, dependencies or
container engine) and then supervises the server process.
"""

__version__ = "0.3.0"

from zenlaunch.core.config.models import LauncherConfig
from zenlaunch.core.launch.models import ExecutionMode

__all__ = ["LauncherConfig", "ExecutionMode", "__version__"]
