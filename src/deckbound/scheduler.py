"""
Periodic timer capability for the mapping core.

Timers never run on their own thread. The owner calls run_due() from the same
loop that dispatches MIDI input, so timer callbacks are serialised with every
other handler.
"""

import time
from typing import Callable, Optional

from deckbound.logging_config import get_logger

logger = get_logger(__name__)

TimerCallback = Callable[[], None]


class _Timer:
    __slots__ = ("handle", "interval", "callback", "deadline")

    def __init__(self, handle: int, interval: float, callback: TimerCallback, deadline: float):
        self.handle = handle
        self.interval = interval
        self.callback = callback
        self.deadline = deadline


class PollingScheduler:
    """
    Handle-based periodic timers polled from the dispatch loop.

    Handles are positive integers and never reused.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        """
        Args:
            clock: Monotonic time source in seconds (injectable for tests)
        """
        self._clock = clock
        self._timers: dict[int, _Timer] = {}
        self._next_handle = 1

    def begin_timer(self, interval_ms: int, callback: TimerCallback) -> int:
        """
        Schedule a recurring callback.

        Args:
            interval_ms: Period in milliseconds
            callback: Function called once per period

        Returns:
            Timer handle for cancel_timer()

        Raises:
            ValueError: If interval is not positive
        """
        if interval_ms <= 0:
            raise ValueError(f"Timer interval must be positive, got {interval_ms}")

        handle = self._next_handle
        self._next_handle += 1

        interval = interval_ms / 1000.0
        self._timers[handle] = _Timer(handle, interval, callback, self._clock() + interval)
        logger.debug(f"Started timer {handle} ({interval_ms} ms)")
        return handle

    def cancel_timer(self, handle: int) -> bool:
        """
        Cancel a timer.

        Args:
            handle: Handle returned by begin_timer()

        Returns:
            True if the timer existed and was removed
        """
        if self._timers.pop(handle, None) is None:
            return False
        logger.debug(f"Cancelled timer {handle}")
        return True

    def run_due(self, now: Optional[float] = None) -> int:
        """
        Run every timer whose deadline has passed.

        Each due timer fires at most once per call and is re-armed one
        interval after its previous deadline. A callback that cancels its own
        timer is not re-armed.

        Args:
            now: Current time (defaults to the clock)

        Returns:
            Number of callbacks run
        """
        if now is None:
            now = self._clock()

        due = [timer for timer in self._timers.values() if timer.deadline <= now]
        count = 0

        for timer in sorted(due, key=lambda t: t.handle):
            # Cancelled by an earlier callback in this pass
            if timer.handle not in self._timers:
                continue

            timer.deadline += timer.interval
            if timer.deadline <= now:
                timer.deadline = now + timer.interval

            try:
                timer.callback()
            except Exception as e:
                callback_name = getattr(timer.callback, "__name__", repr(timer.callback))
                logger.exception(f"Error in timer callback '{callback_name}': {e}")
            count += 1

        return count

    @property
    def active_handles(self) -> list[int]:
        """Handles of all scheduled timers."""
        return sorted(self._timers)

    def is_active(self, handle: int) -> bool:
        return handle in self._timers

    def cancel_all(self) -> None:
        """Cancel every timer."""
        self._timers.clear()
