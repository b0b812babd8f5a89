# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0
import threading
from collections.abc import Callable
from typing import Protocol


class ScheduledTask(Protocol):
    """Handle to a pending one-shot task."""

    def cancel(self) -> None:
        """Stop the task from running if it hasn't started yet."""
        ...


class Scheduler(Protocol):
    """Runs a callback once after a delay."""

    def schedule(self, delay: float, callback: Callable[[], None]) -> ScheduledTask:
        """Run ``callback`` once, ``delay`` seconds from now."""
        ...


class ThreadingScheduler:
    """Schedules each callback on its own daemon :py:class:`threading.Timer`.

    Daemon timers never keep the interpreter alive on exit.
    """

    def __init__(self, name: str = "nosql-signature-refresh") -> None:
        self._name = name

    def schedule(self, delay: float, callback: Callable[[], None]) -> ScheduledTask:
        timer = threading.Timer(delay, callback)
        timer.name = self._name
        timer.daemon = True
        timer.start()
        return timer
