"""Base class for objects that run their work on a background thread."""

from __future__ import annotations

import threading


class Worker:
    """Runs :meth:`process` on a thread; subclasses watch :attr:`stop_event`."""

    def __init__(self) -> None:
        self._thread: threading.Thread | None = None
        self._running = False
        self.stop_event = threading.Event()

    @property
    def stop_requested(self) -> bool:
        """True once a stop has been asked for."""
        return self.stop_event.is_set()

    def start_thread(self) -> None:
        """Start :meth:`process` on a new thread."""
        self.stop_event.clear()
        self._running = True
        self._thread = threading.Thread(target=self._run, daemon=True)
        self._thread.start()

    def _run(self) -> None:
        try:
            self.process()
        finally:
            self._running = False

    def process(self) -> None:
        """The thread's work; does nothing unless overridden."""

    def stop_thread(self) -> None:
        """Ask the thread to stop and wait for it."""
        self.async_stop_thread()
        self.join_thread()

    def async_stop_thread(self) -> None:
        """Ask the thread to stop without waiting."""
        self.stop_event.set()

    def join_thread(self) -> None:
        """Wait for the thread to finish, if one was started."""
        if self._thread is not None:
            self._thread.join()
            self._thread = None

    def is_running(self) -> bool:
        """True while :meth:`process` has not returned."""
        return self._running