"""
Docker engine client.

Thin wrapper over the docker CLI covering what the launcher needs: daemon
health, image presence and build, container presence, compose startup and
the exec command used to run the server inside the container.
"""

from __future__ import annotations

import logging
import subprocess
import sys
from pathlib import Path

logger = logging.getLogger(__name__)


class DockerEngine:
    """
    Docker CLI wrapper.

    Read-only queries capture output; build and compose stream their output
    to the launcher's stderr so progress is visible without touching stdout.
    """

    def __init__(self, binary: str = "docker", probe_timeout: float = 10.0) -> None:
        self._binary = binary
        self._probe_timeout = probe_timeout

    @property
    def binary(self) -> str:
        return self._binary

    def is_running(self) -> bool:
        """
        Check if the Docker daemon accepts commands.

        Returns:
            True if `docker info` succeeds within the probe timeout
        """
        try:
            result = subprocess.run(
                [self._binary, "info"],
                capture_output=True,
                timeout=self._probe_timeout,
            )
            return result.returncode == 0
        except (subprocess.TimeoutExpired, OSError):
            return False

    def image_exists(self, image: str) -> bool:
        """Check if an image is present locally."""
        result = self._run_docker(["image", "inspect", image], check=False)
        return result.returncode == 0

    def build_image(self, image: str, context_dir: Path) -> None:
        """
        Build an image from a directory containing a Dockerfile.

        Raises:
            subprocess.CalledProcessError: If the build fails
        """
        self._stream_docker(["build", "-t", image, "."], cwd=context_dir)

    def container_running(self, container_name: str) -> bool:
        """Check if a container with exactly this name is running."""
        result = self._run_docker(
            ["ps", "--filter", f"name=^{container_name}$", "--format", "{{.Names}}"],
            check=False,
        )
        return container_name in result.stdout.split()

    def compose_up(self, project_dir: Path) -> None:
        """
        Start the compose project in the background.

        Raises:
            subprocess.CalledProcessError: If compose fails
        """
        self._stream_docker(["compose", "up", "-d"], cwd=project_dir)

    def exec_argv(self, container_name: str, command: list[str]) -> list[str]:
        """
        Build the argv that runs ``command`` inside a running container.

        stdin stays attached (-i) since the server talks over stdio; no TTY
        is allocated so the byte stream is left untouched.
        """
        return [self._binary, "exec", "-i", container_name, *command]

    def get_version(self) -> str:
        """
        Get Docker server version.

        Returns:
            Docker version string or 'unknown'
        """
        try:
            result = self._run_docker(["version", "--format", "{{.Server.Version}}"])
            return result.stdout.strip()
        except (subprocess.CalledProcessError, subprocess.TimeoutExpired, OSError):
            return "unknown"

    # =========================================================================
    # Private helpers
    # =========================================================================

    def _run_docker(
        self,
        args: list[str],
        check: bool = True,
    ) -> subprocess.CompletedProcess[str]:
        """
        Run a docker command and capture its output.

        Args:
            args: Docker command arguments
            check: Raise on non-zero exit code

        Returns:
            CompletedProcess result

        Raises:
            subprocess.TimeoutExpired: If docker does not answer in time
        """
        cmd = [self._binary] + args
        result = subprocess.run(
            cmd,
            capture_output=True,
            text=True,
            timeout=300,
        )
        if check and result.returncode != 0:
            raise subprocess.CalledProcessError(
                result.returncode,
                cmd,
                result.stdout,
                result.stderr,
            )
        return result

    def _stream_docker(self, args: list[str], cwd: Path) -> None:
        """Run a long docker command with its output sent to stderr."""
        cmd = [self._binary] + args
        logger.debug("Running %s in %s", " ".join(cmd), cwd)
        subprocess.run(cmd, cwd=cwd, stdout=sys.stderr, check=True)


__all__ = ["DockerEngine"]
