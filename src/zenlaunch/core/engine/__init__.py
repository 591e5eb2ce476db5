"""
Container engine support for containerized mode.

Modules:
    docker: DockerEngine CLI wrapper
    readiness: EngineReadinessController (probe, start, bounded polling)
    container: ensure_image / ensure_container provisioning
    models: EngineState
"""

from zenlaunch.core.engine.container import ensure_container, ensure_image
from zenlaunch.core.engine.docker import DockerEngine
from zenlaunch.core.engine.models import EngineState
from zenlaunch.core.engine.readiness import (
    EngineReadinessController,
    manual_start_instructions,
)

__all__ = [
    "DockerEngine",
    "EngineReadinessController",
    "EngineState",
    "ensure_container",
    "ensure_image",
    "manual_start_instructions",
]
