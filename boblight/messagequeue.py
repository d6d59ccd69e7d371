"""Splits incoming text into newline-terminated, timestamped messages."""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass

from .timeutils import get_time_us

MAXDATA = 100000  # most data accepted without a newline


@dataclass
class Message:
    """One line of received text and the time its first byte arrived."""

    message: str = ""
    time: int = 0


class MessageQueue:
    """Queue of complete lines built from arbitrarily split chunks of data."""

    def __init__(self) -> None:
        self._messages: deque[Message] = deque()
        self._remaining = Message()

    def __len__(self) -> int:
        return len(self._messages)

    def add_data(self, data: str | bytes) -> None:
        """Append received data; every completed line becomes a message."""
        if isinstance(data, (bytes, bytearray)):
            data = bytes(data).split(b"\0", 1)[0].decode("latin-1")

        now = get_time_us()
        if "\n" not in data:
            if not self._remaining.message:
                self._remaining.time = now
            self._remaining.message += data
            return

        *lines, tail = data.split("\n")
        message = Message(self._remaining.message, self._remaining.time)
        if not message.message:
            message.time = now
        for line in lines:
            message.message += line
            self._messages.append(message)
            message = Message("", now)

        self._remaining = Message(tail, now)

    def get_message(self) -> Message:
        """Remove and return the oldest message, or an empty one if none is queued."""
        if not self._messages:
            return Message()
        return self._messages.popleft()

    def remaining_data_size(self) -> int:
        """Length of the data received after the last newline."""
        return len(self._remaining.message)

    def clear(self) -> None:
        """Drop all queued messages and any partial line."""
        self._remaining.message = ""
        self._messages.clear()