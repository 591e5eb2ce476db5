"""
Image and container provisioning for containerized mode.

Both steps short-circuit when their artifact already exists.
"""

from __future__ import annotations

import logging
import subprocess
import time
from collections.abc import Callable
from pathlib import Path

from zenlaunch.core.config.models import ContainerConfig
from zenlaunch.core.engine.docker import DockerEngine
from zenlaunch.core.errors import ProvisioningError

logger = logging.getLogger(__name__)


def _unresponsive(query: str, error: subprocess.TimeoutExpired) -> ProvisioningError:
    return ProvisioningError(
        f"Docker did not answer `{query}`",
        reason=str(error),
        solution=[
            "Restart Docker and wait until `docker info` succeeds",
            "Then run this command again (or use --native to skip Docker).",
        ],
    )


def ensure_image(engine: DockerEngine, workspace: Path, image: str) -> bool:
    """
    Build the server image from the workspace unless it already exists.

    Returns:
        True if an image was built

    Raises:
        ProvisioningError: If the engine hangs or the build fails
    """
    try:
        exists = engine.image_exists(image)
    except subprocess.TimeoutExpired as e:
        raise _unresponsive(f"docker image inspect {image}", e) from e
    if exists:
        logger.debug("Image %s already present", image)
        return False

    try:
        engine.build_image(image, workspace)
    except (subprocess.CalledProcessError, OSError) as e:
        raise ProvisioningError(
            f"Failed to build Docker image {image}",
            reason=str(e),
            solution=[
                f"cd {workspace}",
                f"docker build -t {image} .",
                "Fix the reported build error, then run this command again.",
            ],
        ) from e
    return True


def ensure_container(
    engine: DockerEngine,
    workspace: Path,
    config: ContainerConfig,
    sleep: Callable[[float], None] = time.sleep,
) -> bool:
    """
    Start the server container with compose unless it is already running.

    After starting, waits ``config.settle_delay`` seconds before returning.

    Returns:
        True if the container was started

    Raises:
        ProvisioningError: If the engine hangs or compose fails
    """
    try:
        running = engine.container_running(config.container_name)
    except subprocess.TimeoutExpired as e:
        raise _unresponsive("docker ps", e) from e
    if running:
        logger.debug("Container %s already running", config.container_name)
        return False

    try:
        engine.compose_up(workspace)
    except (subprocess.CalledProcessError, OSError) as e:
        raise ProvisioningError(
            f"Failed to start container {config.container_name}",
            reason=str(e),
            solution=[
                f"cd {workspace}",
                "docker compose up -d",
                "Check `docker compose logs`, then run this command again.",
            ],
        ) from e

    if config.settle_delay > 0:
        sleep(config.settle_delay)
    return True


__all__ = ["ensure_container", "ensure_image"]
