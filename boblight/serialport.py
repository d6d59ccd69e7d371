"""Raw serial port access through the POSIX terminal interface."""

from __future__ import annotations

import enum
import os
import select
import sys
import termios

from .timeutils import get_time_us

_BAUDRATES = (
    50, 75, 110, 134, 150, 200, 300, 600, 1200, 1800, 2400, 4800, 9600, 14400,
    19200, 28800, 38400, 57600, 76800, 115200, 230400, 250000, 460800, 500000,
    576000, 921600, 1000000, 1152000, 1500000, 2000000, 2500000, 3000000,
    3500000, 4000000,
)

# baudrates this platform knows, mapped to their termios speed symbols
_RATE_SYMBOLS = {
    rate: getattr(termios, f"B{rate}")
    for rate in _BAUDRATES
    if hasattr(termios, f"B{rate}")
}


def _flag(name: str) -> int:
    """A termios flag, or 0 where the platform lacks it."""
    return getattr(termios, name, 0)


class Parity(enum.IntEnum):
    """Parity setting of a serial port."""

    NONE = 0
    EVEN = 1
    ODD = 2


class SerialPortError(Exception):
    """A serial port operation failed."""


def int_to_rate(baudrate: int) -> int:
    """The termios speed symbol for ``baudrate``; raises ValueError when unsupported."""
    try:
        return _RATE_SYMBOLS[baudrate]
    except KeyError:
        raise ValueError(f"{baudrate} is not a valid baudrate") from None


class SerialPort:
    """A serial port opened in raw, non-blocking mode.

    Problems configuring the port do not stop it from opening, since the port
    may still be usable; they are kept in :attr:`error`.
    """

    def __init__(self) -> None:
        self._fd = -1
        self.name = ""
        self.error = ""
        self.print_to_stdout = False

    def __enter__(self) -> SerialPort:
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def __del__(self) -> None:
        self.close()

    @property
    def has_error(self) -> bool:
        """True when opening or configuring the port left an error behind."""
        return bool(self.error)

    def is_open(self) -> bool:
        """True while the port is open."""
        return self._fd != -1

    def fileno(self) -> int:
        """The port's file descriptor, -1 when closed."""
        return self._fd

    def _fail(self, message: str) -> SerialPortError:
        self.error = message
        return SerialPortError(f"{self.name}: {message}")

    def open(self, name: str, baudrate: int, databits: int = 8, stopbits: int = 1,
             parity: Parity | int = Parity.NONE) -> None:
        """Open ``name`` and set its speed, data bits, stop bits and parity."""
        self.close()
        self.name = name
        self.error = ""

        if not 5 <= databits <= 8:
            raise self._fail("Databits has to be between 5 and 8")
        if stopbits not in (1, 2):
            raise self._fail("Stopbits has to be 1 or 2")
        try:
            parity = Parity(parity)
        except ValueError:
            raise self._fail("Parity has to be none, even or odd") from None

        try:
            self._fd = os.open(name, os.O_RDWR | os.O_NOCTTY)
        except OSError as exc:
            raise self._fail(f"open() {exc.strerror}") from exc

        os.set_blocking(self._fd, True)
        try:
            options = termios.tcgetattr(self._fd)
        except termios.error as exc:
            self.error = f"tcgetattr() {exc.args[-1]}"
        else:
            self._set_baud_rate(options, baudrate)
            self._set_port_options(options, databits, stopbits, parity)
        os.set_blocking(self._fd, False)

    def _set_baud_rate(self, options: list, baudrate: int) -> None:
        try:
            rate = int_to_rate(baudrate)
        except ValueError as exc:
            self.error = str(exc)
            return
        options[4] = rate
        options[5] = rate

    def _set_port_options(self, options: list, databits: int, stopbits: int,
                          parity: Parity) -> None:
        iflag, oflag, cflag, lflag = options[0:4]

        cflag |= termios.CLOCAL | termios.CREAD
        cflag &= ~termios.HUPCL

        cflag &= ~termios.CSIZE
        cflag |= {5: termios.CS5, 6: termios.CS6, 7: termios.CS7, 8: termios.CS8}[databits]

        cflag &= ~(termios.PARENB | termios.PARODD)
        if parity in (Parity.EVEN, Parity.ODD):
            cflag |= termios.PARENB
        if parity == Parity.ODD:
            cflag |= termios.PARODD

        cflag &= ~(_flag("CRTSCTS") or _flag("CNEW_RTSCTS"))

        if stopbits == 1:
            cflag &= ~termios.CSTOPB
        else:
            cflag |= termios.CSTOPB

        lflag &= ~(
            termios.ICANON | termios.ECHO | termios.ECHOE | termios.ISIG | termios.ECHOK
            | termios.ECHONL | _flag("ECHOCTL") | _flag("ECHOKE") | termios.TOSTOP
            | _flag("XCASE") | _flag("ECHOPRT")
        )

        if parity == Parity.NONE:
            iflag &= ~termios.INPCK
        else:
            iflag |= termios.INPCK | termios.ISTRIP

        iflag &= ~(
            termios.IXON | termios.IXOFF | termios.IXANY | termios.BRKINT | termios.INLCR
            | termios.IGNCR | termios.ICRNL | _flag("IMAXBEL") | _flag("IUCLC")
        )

        oflag &= ~(termios.OPOST | termios.ONLCR | termios.OCRNL)

        options[0:4] = [iflag, oflag, cflag, lflag]
        try:
            termios.tcsetattr(self._fd, termios.TCSANOW, options)
        except termios.error as exc:
            error = f"tcsetattr() {exc.args[-1]}"
            # keep any earlier baudrate error
            self.error = f"{self.error}, {error}" if self.error else error

    def close(self) -> None:
        """Close the port if it is open."""
        if self._fd != -1:
            os.close(self._fd)
            self._fd = -1
            self.name = ""
            self.error = ""

    def _trace(self, what: str, data: bytes) -> None:
        if self.print_to_stdout:
            sys.stdout.write(f"{self.name} {what}:" + "".join(f" {b:02x}" for b in data) + "\n")

    def write(self, data: bytes) -> int:
        """Write all of ``data``, blocking until it is sent; returns the byte count."""
        if self._fd == -1:
            raise self._fail("port closed")

        payload = bytes(data)
        view = memoryview(payload)
        written = 0
        while written < len(payload):
            try:
                select.select([], [self._fd], [])
            except OSError as exc:
                raise self._fail(f"select() {exc.strerror}") from exc
            try:
                written += os.write(self._fd, view[written:])
            except BlockingIOError:
                continue
            except OSError as exc:
                raise self._fail(f"write() {exc.strerror}") from exc

        self._trace("write", payload)
        return written

    def read(self, size: int, usecs: int = -1) -> bytes:
        """Read exactly ``size`` bytes, waiting at most ``usecs`` microseconds (-1: forever)."""
        if self._fd == -1:
            raise self._fail("port closed")

        now = get_time_us()
        target = now + usecs
        data = bytearray()
        while len(data) < size:
            if usecs < 0:
                timeout = None
            else:
                if now >= target:
                    raise self._fail("read timed out")
                timeout = (target - now) / 1_000_000.0

            try:
                ready, _, _ = select.select([self._fd], [], [], timeout)
            except OSError as exc:
                raise self._fail(f"select() {exc.strerror}") from exc
            if not ready:
                raise self._fail("read timed out")

            try:
                data += os.read(self._fd, size - len(data))
            except BlockingIOError:
                pass
            except OSError as exc:
                raise self._fail(f"read() {exc.strerror}") from exc

            now = get_time_us()

        result = bytes(data)
        self._trace("read", result)
        return result