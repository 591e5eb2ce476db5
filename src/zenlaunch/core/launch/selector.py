"""
Runtime mode selection.

A pure decision on the user's flag. Probing and provisioning happen in the
mode-specific stages afterwards.
"""

from __future__ import annotations

from zenlaunch.core.launch.models import ExecutionMode


def select_mode(native: bool) -> ExecutionMode:
    """
    Choose the execution mode.

    Examples:
        >>> select_mode(native=False)
        <ExecutionMode.CONTAINERIZED: 'containerized'>
        >>> select_mode(native=True)
        <ExecutionMode.NATIVE: 'native'>
    """
    return ExecutionMode.NATIVE if native else ExecutionMode.CONTAINERIZED


__all__ = ["select_mode"]
