"""
Engine readiness controller.

State machine for the container engine:

    UNKNOWN --probe--> READY | NOT_RUNNING
    NOT_RUNNING --start--> STARTING
    STARTING --poll--> READY | FAILED

Polling is bounded by max_attempts so the loop always terminates. Starting
the engine is not retried across invocations.
"""

from __future__ import annotations

import logging
import platform
import subprocess
import time
from collections.abc import Callable

from zenlaunch.core.engine.docker import DockerEngine
from zenlaunch.core.engine.models import EngineState
from zenlaunch.core.errors import ProvisioningError, ReadinessTimeoutError

logger = logging.getLogger(__name__)

# Desktop platforms where the launcher knows how to start the engine
START_COMMANDS: dict[str, list[str]] = {
    "Darwin": ["open", "-a", "Docker"],
}

MANUAL_START: dict[str, str] = {
    "Darwin": "Start Docker Desktop from /Applications",
    "Linux": "sudo systemctl start docker",
    "Windows": "Start Docker Desktop from the Start menu",
}


def manual_start_instructions(system: str) -> list[str]:
    """Instructions for starting the engine by hand on ``system``."""
    step = MANUAL_START.get(system, "Start the Docker daemon")
    return [
        step,
        "Wait until `docker info` succeeds",
        "Then run this command again (or use --native to skip Docker).",
    ]


class EngineReadinessController:
    """
    Makes sure the container engine is ready before anything uses it.

    Example:
        >>> controller = EngineReadinessController(DockerEngine(), max_attempts=30)
        >>> controller.ensure_ready()
        <EngineState.READY: 'ready'>
    """

    def __init__(
        self,
        engine: DockerEngine,
        *,
        max_attempts: int = 30,
        poll_interval: float = 2.0,
        sleep: Callable[[float], None] = time.sleep,
        system: str | None = None,
        on_attempt: Callable[[int, int], None] | None = None,
    ) -> None:
        if max_attempts < 1:
            raise ValueError("max_attempts must be >= 1")
        self._engine = engine
        self._max_attempts = max_attempts
        self._poll_interval = poll_interval
        self._sleep = sleep
        self._system = system if system is not None else platform.system()
        self._on_attempt = on_attempt
        self._state = EngineState.UNKNOWN
        self._attempts = 0

    @property
    def state(self) -> EngineState:
        return self._state

    @property
    def attempts(self) -> int:
        """Readiness polls made while STARTING."""
        return self._attempts

    def probe(self) -> EngineState:
        """Probe once and move from UNKNOWN to READY or NOT_RUNNING."""
        self._state = EngineState.READY if self._engine.is_running() else EngineState.NOT_RUNNING
        logger.debug("Engine probe: %s", self._state.value)
        return self._state

    def start_engine(self) -> None:
        """
        Issue the platform start command and enter STARTING.

        Raises:
            ProvisioningError: On platforms without an auto-start command,
                or if the start command itself cannot run
        """
        command = START_COMMANDS.get(self._system)
        if command is None:
            self._state = EngineState.FAILED
            raise ProvisioningError(
                "Docker is not running",
                reason=f"Starting Docker automatically is not supported on {self._system}",
                solution=manual_start_instructions(self._system),
            )

        logger.info("Starting Docker: %s", " ".join(command))
        try:
            subprocess.run(command, capture_output=True, check=True)
        except (subprocess.CalledProcessError, OSError) as e:
            self._state = EngineState.FAILED
            raise ProvisioningError(
                "Failed to start Docker",
                reason=str(e),
                solution=manual_start_instructions(self._system),
            ) from e
        self._state = EngineState.STARTING

    def wait_until_ready(self) -> EngineState:
        """
        Poll readiness until READY or the attempt budget is spent.

        Returns:
            READY or FAILED; never loops past max_attempts
        """
        self._state = EngineState.STARTING
        for attempt in range(1, self._max_attempts + 1):
            self._attempts = attempt
            if self._on_attempt is not None:
                self._on_attempt(attempt, self._max_attempts)
            self._sleep(self._poll_interval)
            if self._engine.is_running():
                self._state = EngineState.READY
                return self._state
        self._state = EngineState.FAILED
        return self._state

    def ensure_ready(self) -> EngineState:
        """
        Drive the state machine to READY.

        Raises:
            ProvisioningError: If the engine cannot be started on this platform
            ReadinessTimeoutError: If the engine never becomes ready
        """
        if self.probe() == EngineState.READY:
            return self._state

        self.start_engine()
        if self.wait_until_ready() == EngineState.READY:
            logger.info("Docker ready after %d attempt(s)", self._attempts)
            return self._state

        raise ReadinessTimeoutError(
            self._max_attempts,
            solution=manual_start_instructions(self._system),
        )


__all__ = [
    "EngineReadinessController",
    "START_COMMANDS",
    "manual_start_instructions",
]
