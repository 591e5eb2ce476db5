"""
Configuration models and loading.

This module provides Pydantic models for launcher configuration with
multi-layer merging: defaults < user config < env vars, plus helpers for
the workspace's KEY=VALUE config file.
"""

from .env import build_child_env, read_env_file
from .loader import (
    get_user_config_path,
    get_xdg_config_home,
    load_config,
)
from .models import (
    ContainerConfig,
    EngineConfig,
    LauncherConfig,
    NativeConfig,
    WorkspaceConfig,
)

__all__ = [
    # Models
    "ContainerConfig",
    "EngineConfig",
    "LauncherConfig",
    "NativeConfig",
    "WorkspaceConfig",
    # Loader functions
    "get_user_config_path",
    "get_xdg_config_home",
    "load_config",
    # Env file helpers
    "build_child_env",
    "read_env_file",
]
