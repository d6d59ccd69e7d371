"""Log lines to a rotated file under ``$HOME/.boblight`` and to standard error."""

from __future__ import annotations

import os
import sys
import threading
from datetime import datetime
from typing import TextIO

from .misc import print_error

_FUNCTION_WIDTH = 32
_KEPT_LOGS = 5


def get_str_time() -> str:
    """Local time as ``hours:minutes:seconds.microseconds``."""
    return datetime.now().strftime("%H:%M:%S.%f")


def prune_function(function: str) -> str:
    """Reduce a full function signature to its (qualified) name."""
    paren = function.find("(")
    if paren == -1:
        return function
    space = function.rfind(" ", 0, paren + 1)
    if space == -1:
        return function
    return function[space + 1:paren]


class LogWriter:
    """Writes log lines; lines logged before the file is open are kept and written later."""

    def __init__(self, log_to_stderr: bool = True, print_to_file: bool = True,
                 stream: TextIO | None = None) -> None:
        self.log_to_stderr = log_to_stderr
        self.print_to_file = print_to_file
        self._stream = stream
        self._lock = threading.RLock()
        self._file: TextIO | None = None
        self._pending: list[str] = []

    @property
    def path(self) -> str | None:
        """Path of the open log file, if any."""
        return self._file.name if self._file is not None else None

    def set_log_file(self, filename: str, home: str | None = None) -> bool:
        """Open ``filename`` in the log directory, rotating older logs.

        On failure file logging is switched off. Returns whether a log file is open.
        """
        with self._lock:
            if self._file is None and not self._init_log(filename, home):
                self.print_to_file = False
            return self._file is not None

    def _init_log(self, filename: str, home: str | None) -> bool:
        home = home if home is not None else os.environ.get("HOME")
        if not home:
            print_error("$HOME is not set")
            return False

        directory = os.path.join(home, ".boblight")
        try:
            os.mkdir(directory, 0o755)
        except FileExistsError:
            pass
        except OSError as exc:
            print_error(f"unable to make directory {directory}/:\n{exc.strerror}")
            return False

        fullpath = os.path.join(directory, filename)
        for i in range(_KEPT_LOGS - 1, 0, -1):
            self._rename(f"{fullpath}.old.{i}", f"{fullpath}.old.{i + 1}")
        self._rename(fullpath, f"{fullpath}.old.1")

        try:
            self._file = open(fullpath, "w", encoding="utf-8")
        except OSError as exc:
            print_error(f"unable to open {fullpath}:\n{exc.strerror}")
            return False

        self.log(f"start of log {fullpath}", function="InitLog")
        return True

    @staticmethod
    def _rename(source: str, target: str) -> None:
        try:
            os.replace(source, target)
        except OSError:
            pass

    def log(self, message: str, function: str | None = None, error: bool = False) -> None:
        """Log ``message``, tagged with ``function`` (the caller's name by default)."""
        if function is None:
            code = sys._getframe(1).f_code
            function = getattr(code, "co_qualname", code.co_name)

        text = ("ERROR: " if error else "") + message
        funcstr = f"({prune_function(function)})".ljust(_FUNCTION_WIDTH)

        with self._lock:
            if self._file is not None and self.print_to_file:
                for line in self._pending:
                    self._file.write(line)
                self._pending.clear()
                self._file.write(f"{get_str_time()} {funcstr} {text}\n")
                self._file.flush()
            elif self.print_to_file:
                self._pending.append(f"{get_str_time()} {funcstr} {text}\n")

            if self.log_to_stderr:
                stream = self._stream if self._stream is not None else sys.stderr
                stream.write(f"{funcstr}{text}\n")
                stream.flush()

    def close(self) -> None:
        """Close the log file if one is open."""
        with self._lock:
            if self._file is not None:
                self._file.close()
                self._file = None

    def __enter__(self) -> LogWriter:
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()