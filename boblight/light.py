"""Server-side lights: their input colour, output colours and the devices using them."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Sequence

from .misc import clamp

_FLT_MAX = 3.4028234663852886e38

RGB = tuple[float, float, float]


@dataclass
class Color:
    """One output channel of a light and the colour it produces at full power."""

    name: str = ""
    rgb: RGB = (0.0, 0.0, 0.0)
    gamma: float = 1.0
    adjust: float = 1.0
    blacklevel: float = 0.0


def _find_multiplier(rgb: Sequence[float], ceiling: Sequence[float]) -> float:
    """Largest factor that keeps every positive component of ``rgb`` under ``ceiling``."""
    multiplier = _FLT_MAX
    for value, top in zip(rgb, ceiling):
        if value > 0.0 and top / value < multiplier:
            multiplier = top / value
    return multiplier


@dataclass
class Light:
    """A light with its last two input colours and the colours it is built from."""

    name: str = ""
    use: bool = True
    interpolation: bool = False
    hscan: tuple[float, float] = (0.0, 100.0)
    vscan: tuple[float, float] = (0.0, 100.0)
    colors: list[Color] = field(default_factory=list)
    _speed: float = field(default=100.0, repr=False)
    _time: int = field(default=-1, repr=False)
    _prevtime: int = field(default=-1, repr=False)
    _rgb: RGB = field(default=(0.0, 0.0, 0.0), repr=False)
    _prevrgb: RGB = field(default=(0.0, 0.0, 0.0), repr=False)
    _users: list[list[Any]] = field(default_factory=list, repr=False)

    @property
    def speed(self) -> float:
        """Transition speed, 0 to 100."""
        return self._speed

    @speed.setter
    def speed(self, value: float) -> None:
        self._speed = clamp(value, 0.0, 100.0)

    @property
    def rgb(self) -> RGB:
        """The most recently written colour."""
        return self._rgb

    def set_rgb(self, rgb: Sequence[float], time: int) -> None:
        """Store a new input colour written at ``time``, keeping the previous one."""
        clamped = tuple(clamp(value, 0.0, 1.0) for value in rgb)
        if len(clamped) != 3:
            raise ValueError("rgb needs exactly three components")
        self._prevrgb = self._rgb
        self._rgb = clamped  # type: ignore[assignment]
        self._prevtime = self._time
        self._time = time

    def add_color(self, color: Color) -> None:
        """Add an output colour channel."""
        self.colors.append(color)

    def get_color_value(self, colornr: int, time: int) -> float:
        """Output level (0 to 1) of colour channel ``colornr`` at ``time``."""
        if not 0 <= colornr < len(self.colors):
            raise IndexError(f"light {self.name!r} has no color {colornr}")

        if self.interpolation and self._prevtime == -1:
            return 0.0  # interpolation needs two writes

        if self.interpolation:
            multiply = 0.0
            span = self._time - self._prevtime
            if span > 0:
                multiply = (time - self._time) / span
            multiply = clamp(multiply, 0.0, 1.0)
            rgb = [prev + (cur - prev) * multiply for prev, cur in zip(self._prevrgb, self._rgb)]
        else:
            rgb = list(self._rgb)

        if rgb == [0.0, 0.0, 0.0]:
            return 0.0

        maxrgb = [sum(color.rgb[j] for color in self.colors) for j in range(3)]

        expandvalue = _find_multiplier(rgb, (1.0, 1.0, 1.0))
        rgb = [value * expandvalue for value in rgb]

        scale = _find_multiplier(rgb, maxrgb)
        rgb = [value * scale for value in rgb]

        colorvalue = 0.0
        for color in self.colors[: colornr + 1]:
            colorvalue = clamp(_find_multiplier(color.rgb, rgb), 0.0, 1.0)
            rgb = [value - part * colorvalue for value, part in zip(rgb, color.rgb)]

        return colorvalue / expandvalue

    @property
    def users(self) -> list[Any]:
        """Devices currently using this light, in the order they were added."""
        return [device for device, _ in self._users]

    def add_user(self, device: Any) -> None:
        """Register ``device`` as a user, once."""
        if not any(user is device for user, _ in self._users):
            self._users.append([device, 0.0])

    def clear_user(self, device: Any) -> None:
        """Remove ``device`` from the users, if present."""
        for i, (user, _) in enumerate(self._users):
            if user is device:
                del self._users[i]
                return

    def set_single_change(self, singlechange: float) -> None:
        """Set the one-off change amount for every user, limited to 0..1."""
        value = clamp(singlechange, 0.0, 1.0)
        for entry in self._users:
            entry[1] = value

    def get_single_change(self, device: Any) -> float:
        """The pending one-off change for ``device``, 0 when it is not a user."""
        for user, value in self._users:
            if user is device:
                return value
        return 0.0

    def reset_single_change(self, device: Any) -> None:
        """Clear the pending one-off change for ``device``."""
        for entry in self._users:
            if entry[0] is device:
                entry[1] = 0.0
                return