"""
Launching and supervising the server process.

Modules:
    models: ExecutionMode, LaunchContext, ProcessSpec
    selector: select_mode (pure decision on the CLI flag)
    signals: SignalChannel (termination signals as published messages)
    supervisor: ProcessSupervisor (spawn, forward signals, exit code)
"""

from zenlaunch.core.launch.models import ExecutionMode, LaunchContext, ProcessSpec
from zenlaunch.core.launch.selector import select_mode
from zenlaunch.core.launch.signals import TERMINATION_SIGNALS, SignalChannel
from zenlaunch.core.launch.supervisor import ProcessSupervisor, exit_code_for

__all__ = [
    "ExecutionMode",
    "LaunchContext",
    "ProcessSpec",
    "ProcessSupervisor",
    "SignalChannel",
    "TERMINATION_SIGNALS",
    "exit_code_for",
    "select_mode",
]
