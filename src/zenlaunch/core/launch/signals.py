"""
Termination signal channel.

The launcher creates one SignalChannel at startup. SIGINT/SIGTERM handlers
publish into it; the process supervisor subscribes while a child runs and
forwards each signal to it. A signal that arrives with no subscriber (no
child yet, e.g. during a clone or dependency install) ends the launcher
immediately.

Usage:
    >>> channel = SignalChannel()
    >>> channel.register()
    >>> unsubscribe = channel.subscribe(lambda signum: child.send_signal(signum))
    >>> ...
    >>> unsubscribe()
    >>> channel.unregister()
"""

from __future__ import annotations

import signal
import sys
from collections.abc import Callable
from typing import Any

Subscriber = Callable[[int], None]

TERMINATION_SIGNALS: tuple[signal.Signals, ...] = (signal.SIGINT, signal.SIGTERM)


class SignalChannel:
    """
    Publishes termination signals to subscribers.

    Attributes:
        received: Signal numbers published so far, in order.
    """

    def __init__(self) -> None:
        self._subscribers: list[Subscriber] = []
        self._original_handlers: dict[int, Any] = {}
        self.received: list[int] = []

    @property
    def registered(self) -> bool:
        return bool(self._original_handlers)

    def register(self) -> None:
        """
        Install handlers for SIGINT and SIGTERM.

        Saves the original handlers so unregister() can restore them.
        """
        for signum in TERMINATION_SIGNALS:
            self._original_handlers[signum] = signal.signal(signum, self._handle_signal)

    def unregister(self) -> None:
        """Restore the handlers that were active before register()."""
        for signum, handler in self._original_handlers.items():
            if handler is not None:
                signal.signal(signum, handler)
        self._original_handlers.clear()

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """
        Receive published signals.

        Returns:
            A function that removes the subscription
        """
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def publish(self, signum: int) -> None:
        """
        Deliver a signal to every subscriber.

        With no subscriber there is nothing to shut down gracefully, so the
        launcher exits with 128 + signum.
        """
        self.received.append(signum)
        if not self._subscribers:
            self._write_to_stderr(f"\n[Received {_signal_name(signum)}, exiting]\n")
            raise SystemExit(128 + signum)
        for callback in list(self._subscribers):
            callback(signum)

    def _handle_signal(self, signum: int, frame: object) -> None:
        self.publish(signum)

    @staticmethod
    def _write_to_stderr(message: str) -> None:
        # Signal context: avoid the rich console
        sys.stderr.write(message)
        sys.stderr.flush()


def _signal_name(signum: int) -> str:
    try:
        return signal.Signals(signum).name
    except ValueError:
        return f"signal {signum}"


__all__ = ["SignalChannel", "TERMINATION_SIGNALS"]
