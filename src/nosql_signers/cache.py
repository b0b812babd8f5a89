# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0
import logging
import threading
import time
from collections.abc import Callable
from typing import Final

from ._scheduler import ScheduledTask, Scheduler, ThreadingScheduler
from .exceptions import ConfigurationError, NoSQLSignerError
from .signers import SignatureEntry

logger: Final = logging.getLogger(__name__)

MAX_ENTRY_LIFETIME: Final = 300
"""Upper bound, in seconds, on how long a signature may be reused."""

DEFAULT_REFRESH_AHEAD: Final = 10
"""Seconds before expiry at which the cached signature is replaced."""


class SignatureCache:
    """Caches a single signature and keeps it warm in the background.

    A cached entry is served for ``lifetime`` seconds after it was stored. When the
    refresh interval (``lifetime - refresh_ahead``) is positive, every computed entry
    schedules a one-shot background task that replaces it ``refresh_interval``
    seconds later and then schedules the next one. Because each run schedules its
    successor only after signing has finished, a slow signature delays the chain
    instead of overlapping with it.

    A background run that fails is logged and ends the chain. The current entry is
    served until it expires, after which the next caller computes a new one and
    restarts the chain. Errors from the background task never reach callers.
    """

    def __init__(
        self,
        compute: Callable[[], SignatureEntry],
        *,
        lifetime: float = MAX_ENTRY_LIFETIME,
        refresh_ahead: float = DEFAULT_REFRESH_AHEAD,
        scheduler: Scheduler | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """Construct a SignatureCache.

        :param compute: Produces a new signature. May raise :py:class:`SigningError`.
        :param lifetime: Seconds an entry may be served, at most
            :py:data:`MAX_ENTRY_LIFETIME`.
        :param refresh_ahead: Seconds before expiry to refresh the entry. If this
            isn't smaller than ``lifetime``, background refresh is disabled.
        :param scheduler: Runs the background refresh. Defaults to daemon timers.
        :param clock: Monotonic clock, in seconds, used to expire entries.
        """
        if lifetime > MAX_ENTRY_LIFETIME:
            raise ConfigurationError(
                "Request signature cannot be cached longer than "
                f"{MAX_ENTRY_LIFETIME} seconds, got {lifetime}."
            )
        if lifetime <= 0:
            raise ConfigurationError(
                f"Signature lifetime must be positive, got {lifetime}."
            )
        if refresh_ahead < 0:
            raise ConfigurationError(
                f"Refresh ahead time must not be negative, got {refresh_ahead}."
            )

        self._compute = compute
        self._lifetime = lifetime
        self._refresh_ahead = refresh_ahead
        self._refresh_interval = max(0, lifetime - refresh_ahead)
        self._scheduler = scheduler or ThreadingScheduler()
        self._clock = clock

        self._lock = threading.Lock()
        self._entry: SignatureEntry | None = None
        self._inserted_at = 0.0
        self._task: ScheduledTask | None = None
        # Identifies the most recently scheduled task. A task that fires after
        # being superseded or cancelled sees a different value and does nothing.
        self._generation = 0
        self._closed = False

    @property
    def lifetime(self) -> float:
        return self._lifetime

    @property
    def refresh_ahead(self) -> float:
        return self._refresh_ahead

    @property
    def refresh_interval(self) -> float:
        """Seconds between background refreshes, 0 if they are disabled."""
        return self._refresh_interval

    @property
    def refresh_scheduled(self) -> bool:
        """Whether a background refresh is pending."""
        with self._lock:
            return self._task is not None

    def get(self) -> SignatureEntry | None:
        """Return the cached entry if it hasn't expired."""
        with self._lock:
            if self._entry is None:
                return None
            if self._clock() - self._inserted_at >= self._lifetime:
                logger.debug("Cached request signature expired.")
                self._entry = None
                return None
            return self._entry

    def put(self, entry: SignatureEntry) -> None:
        """Store ``entry``, replacing any existing one."""
        with self._lock:
            self._entry = entry
            self._inserted_at = self._clock()

    def evict(self) -> None:
        with self._lock:
            self._entry = None

    def get_or_compute(self) -> SignatureEntry:
        """Return the cached signature, computing and caching a new one on a miss.

        Concurrent misses may each compute a signature; the last one stored wins.

        :raises SigningError: If a new signature is needed and can't be computed.
        """
        entry = self.get()
        if entry is not None:
            return entry

        logger.debug("Request signature cache miss, signing synchronously.")
        entry = self._compute()
        self.put(entry)
        self._schedule_refresh()
        return entry

    def close(self) -> None:
        """Cancel any pending refresh and drop the cached entry.

        Safe to call more than once.
        """
        with self._lock:
            self._closed = True
            self._cancel_task()
            self._entry = None

    def _schedule_refresh(self) -> None:
        if self._refresh_interval <= 0:
            return
        with self._lock:
            if self._closed:
                return
            self._cancel_task()
            self._generation += 1
            generation = self._generation
            self._task = self._scheduler.schedule(
                self._refresh_interval, lambda: self._refresh(generation)
            )
        logger.debug(
            "Scheduled request signature refresh in %s seconds.", self._refresh_interval
        )

    def _cancel_task(self) -> None:
        # Callers must hold self._lock.
        if self._task is not None:
            self._task.cancel()
            self._task = None
        self._generation += 1

    def _end_chain(self, generation: int) -> None:
        with self._lock:
            if generation == self._generation:
                self._task = None

    def _refresh(self, generation: int) -> None:
        with self._lock:
            if self._closed or generation != self._generation:
                return

        # A failed run ends the chain. The next caller to miss the cache signs
        # synchronously and reports the error itself.
        try:
            entry = self._compute()
        except NoSQLSignerError as e:
            logger.warning("Unable to refresh cached request signature: %s", e)
            self._end_chain(generation)
            return
        except Exception:
            logger.warning(
                "Unexpected error refreshing cached request signature.", exc_info=True
            )
            self._end_chain(generation)
            return

        with self._lock:
            if self._closed or generation != self._generation:
                return
            self._entry = entry
            self._inserted_at = self._clock()
        logger.debug("Refreshed cached request signature.")
        self._schedule_refresh()
