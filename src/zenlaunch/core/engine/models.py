"""
Container engine state model.
"""

from enum import Enum


class EngineState(str, Enum):
    """Readiness of the container engine daemon during one invocation."""

    UNKNOWN = "unknown"
    NOT_RUNNING = "not_running"
    STARTING = "starting"
    READY = "ready"
    FAILED = "failed"


__all__ = ["EngineState"]
