"""Fixed-interval timers, one of which can be woken early from another thread."""

from __future__ import annotations

import threading

from .timeutils import get_time_us, usleep

_MAX_WAIT_US = 1_000_000


class Timer:
    """Sleeps so that successive :meth:`wait` calls return once per interval.

    ``stop`` is an optional event; when it is set, long waits end early.
    """

    def __init__(self, stop: threading.Event | None = None) -> None:
        self._interval = -1
        self._time = get_time_us()
        self._stop = stop

    @property
    def interval(self) -> int:
        """The interval in microseconds, or -1 when none has been set."""
        return self._interval

    def set_interval(self, usecs: int) -> None:
        """Set the interval in microseconds and restart the schedule from now."""
        self._interval = usecs
        self.reset()

    def reset(self) -> None:
        """Restart the schedule from the current time."""
        self._time = get_time_us()

    def _next_sleep(self) -> int:
        if self._interval <= 0:
            raise ValueError("timer interval must be set to a positive value")
        now = get_time_us()
        # skip ticks until the target is not too far in the past
        while True:
            self._time += self._interval
            sleeptime = self._time - now
            if sleeptime > self._interval * -2:
                break
        if sleeptime > self._interval * 2:
            # the stored time is broken; fall back to a sane wait
            sleeptime = self._interval * 2
            self.reset()
        return sleeptime

    def _stopped(self) -> bool:
        return self._stop is not None and self._stop.is_set()

    def wait(self) -> None:
        """Sleep until the next tick of the interval."""
        usleep(self._next_sleep(), self._stop)


class SignalTimer(Timer):
    """A :class:`Timer` whose wait can be cut short by :meth:`signal`."""

    def __init__(self, stop: threading.Event | None = None) -> None:
        super().__init__(stop)
        self._condition = threading.Condition(threading.RLock())
        self._signaled = False

    def wait(self) -> None:
        """Sleep until the next tick, a signal, or the stop event."""
        with self._condition:
            sleeptime = self._next_sleep()
            while not self._signaled and sleeptime > 0 and not self._stopped():
                self._condition.wait(min(sleeptime, _MAX_WAIT_US) / 1_000_000.0)
                sleeptime = self._time - get_time_us()

            # a signal restarts the schedule so signals may come faster than the interval
            if self._signaled:
                self.reset()
                self._signaled = False

    def signal(self) -> None:
        """Wake any thread in :meth:`wait`, or make the next wait return at once."""
        with self._condition:
            self._signaled = True
            self._condition.notify_all()