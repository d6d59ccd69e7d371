"""Monotonic time in microseconds and an interruptible sleep."""

from __future__ import annotations

import threading
import time


def get_time_us() -> int:
    """Monotonic clock reading in microseconds."""
    return (time.monotonic_ns() + 500) // 1000


def get_time_sec() -> float:
    """Monotonic clock reading in seconds."""
    return get_time_us() / 1_000_000.0


def usleep(usecs: int, stop: threading.Event | None = None) -> None:
    """Sleep for ``usecs`` microseconds.

    When ``stop`` is given and the sleep is longer than a second, the sleep
    ends early once ``stop`` is set.
    """
    if usecs <= 0:
        return
    if stop is not None and usecs > 1_000_000:
        now = get_time_us()
        end = now + usecs
        while now < end:
            if stop.is_set():
                return
            stop.wait(min(end - now, 1_000_000) / 1_000_000.0)
            now = get_time_us()
    else:
        time.sleep(usecs / 1_000_000.0)