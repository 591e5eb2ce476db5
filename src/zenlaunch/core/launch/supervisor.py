"""
Process supervisor.

Runs exactly one child with the launcher's stdin/stdout/stderr attached
directly, forwards termination signals to it, and turns its exit status
into the launcher's exit code. There is no restart policy: when the child
ends, so does the launcher.
"""

from __future__ import annotations

import logging
import subprocess
from collections.abc import Callable
from typing import Any

from zenlaunch.core.errors import SpawnError
from zenlaunch.core.launch.models import ProcessSpec
from zenlaunch.core.launch.signals import SignalChannel

logger = logging.getLogger(__name__)

PopenFactory = Callable[..., Any]


def exit_code_for(returncode: int, forwarded: list[int]) -> int:
    """
    Map a child's return code to the launcher's exit code.

    - A normal exit code is propagated verbatim.
    - Death by a signal the launcher forwarded counts as a requested,
      graceful shutdown: 0.
    - Death by any other signal (OOM killer, kill -9) is reported as
      128 + signum.

    Examples:
        >>> exit_code_for(3, [])
        3
        >>> exit_code_for(-15, [15])
        0
        >>> exit_code_for(-9, [15])
        137
    """
    if returncode >= 0:
        return returncode
    signum = -returncode
    if signum in forwarded:
        return 0
    return 128 + signum


class ProcessSupervisor:
    """
    Spawns and supervises the server process.

    Example:
        >>> supervisor = ProcessSupervisor(channel)
        >>> exit_code = supervisor.run(ProcessSpec(argv=["python", "server.py"], cwd=ws))
    """

    def __init__(
        self,
        channel: SignalChannel,
        popen: PopenFactory = subprocess.Popen,
    ) -> None:
        self._channel = channel
        self._popen = popen
        self.forwarded_signals: list[int] = []

    def run(self, spec: ProcessSpec) -> int:
        """
        Spawn the child and wait for it.

        The forwarder is subscribed before the spawn so a signal arriving in
        between is held and delivered as soon as the child exists.

        Returns:
            Exit code for the launcher (see exit_code_for)

        Raises:
            SpawnError: If the child could not be created
        """
        process: Any = None
        pending: list[int] = []

        def forward(signum: int) -> None:
            self.forwarded_signals.append(signum)
            if process is None:
                pending.append(signum)
                return
            try:
                process.send_signal(signum)
            except ProcessLookupError:
                logger.debug("Child already exited, dropping signal %d", signum)

        unsubscribe = self._channel.subscribe(forward)
        try:
            logger.debug("Spawning %s in %s", spec.display, spec.cwd)
            try:
                process = self._popen(
                    spec.argv,
                    cwd=spec.cwd,
                    env=spec.env,
                    stdin=None,
                    stdout=None,
                    stderr=None,
                )
            except OSError as e:
                raise SpawnError(spec.display, e) from e

            for signum in pending:
                process.send_signal(signum)
            returncode = process.wait()
        finally:
            unsubscribe()

        logger.debug("Child exited with %s", returncode)
        return exit_code_for(returncode, self.forwarded_signals)


__all__ = ["ProcessSupervisor", "exit_code_for"]
