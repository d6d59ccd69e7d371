"""Client-side lights: pixel averaging, colour adjustments and per-light options."""

from __future__ import annotations

import re
from dataclasses import dataclass, field

from .misc import clamp, get_word, round32, str_to_bool, str_to_float, to_string

GAMMASIZE = 256

_INT_RE = re.compile(r"[ \t\n\v\f\r]*([+-]?[0-9]+)")
_INT_MIN = -(2**31)
_INT_MAX = 2**31 - 1


class OptionError(ValueError):
    """An option string could not be applied or read."""


@dataclass(frozen=True)
class OptionSpec:
    """Description of one light option, as given in its table row."""

    name: str
    type: str
    minimum: str
    maximum: str
    default: str
    sends: bool = False

    @property
    def default_value(self) -> float | int | bool:
        """The default parsed to the option's type."""
        if self.type == "bool":
            return self.default == "true"
        if self.type == "int":
            return int(self.default)
        return float(self.default)

    def parse(self, text: str) -> float | int | bool:
        """Parse ``text`` as a value of this option's type; raises ValueError."""
        if self.type == "bool":
            return str_to_bool(text)
        if self.type == "int":
            match = _INT_RE.match(text)
            if not match:
                raise ValueError(f"not an integer: {text!r}")
            number = int(match.group(1))
            if not _INT_MIN <= number <= _INT_MAX:
                raise ValueError(f"integer out of range: {text!r}")
            return number
        return str_to_float(text)


OPTIONS: tuple[OptionSpec, ...] = (
    OptionSpec("speed", "float", "0.0", "100.0", "100.0", sends=True),
    OptionSpec("autospeed", "float", "0", "100.0", "0.0"),
    OptionSpec("interpolation", "bool", "false", "true", "false", sends=True),
    OptionSpec("use", "bool", "false", "true", "true", sends=True),
    OptionSpec("saturation", "float", "0.0", "20.0", "1.0"),
    OptionSpec("saturationmin", "float", "0.0", "1.0", "0.0"),
    OptionSpec("saturationmax", "float", "0.0", "1.0", "1.0"),
    OptionSpec("value", "float", "0.0", "20.0", "1.0"),
    OptionSpec("valuemin", "float", "0.0", "1.0", "0.0"),
    OptionSpec("valuemax", "float", "0.0", "1.0", "1.0"),
    OptionSpec("threshold", "int", "0", "255", "0"),
    OptionSpec("gamma", "float", "0.0", "10.0", "1.0"),
    OptionSpec("hscanstart", "float", "0.0", "100.0", "-1.0"),
    OptionSpec("hscanend", "float", "0.0", "100.0", "-1.0"),
    OptionSpec("vscanstart", "float", "0.0", "100.0", "-1.0"),
    OptionSpec("vscanend", "float", "0.0", "100.0", "-1.0"),
)

_BY_NAME = {spec.name: spec for spec in OPTIONS}


def _column(text: str, width: int) -> str:
    return text + " " * max(width - len(text), 1)


def option_descriptions() -> list[str]:
    """A header line followed by one aligned line per option: name, type, min, max, default."""
    padsize = max(len(spec.name) + 1 for spec in OPTIONS)
    lines = [_column("name", padsize) + "type    min     max     default"]
    for spec in OPTIONS:
        default = "set by boblightd" if spec.default == "-1.0" else spec.default
        lines.append(
            spec.name.ljust(padsize)
            + _column(spec.type, 8)
            + _column(spec.minimum, 8)
            + _column(spec.maximum, 8)
            + default
        )
    return lines


@dataclass
class ClientLight:
    """A light as seen by a client: accumulates pixels and turns them into a colour."""

    name: str = ""
    singlechange: float = 0.0
    width: int = -1
    height: int = -1
    hscanscaled: list[int] = field(default_factory=lambda: [0, 0])
    vscanscaled: list[int] = field(default_factory=lambda: [0, 0])
    gammacurve: list[float] = field(default_factory=lambda: [float(i) for i in range(GAMMASIZE)])
    rgbcount: int = 0
    _rgb: list[float] = field(default_factory=lambda: [0.0, 0.0, 0.0], repr=False)
    _prevrgb: list[float] = field(default_factory=lambda: [0.0, 0.0, 0.0], repr=False)

    def __post_init__(self) -> None:
        self.valuerange = [0.0, 1.0]
        self.satrange = [0.0, 1.0]
        self.hscan = [0.0, 0.0]
        self.vscan = [0.0, 0.0]
        for spec in OPTIONS:
            self._store(spec.name, spec.default_value)

    def _store(self, name: str, value) -> None:
        match name:
            case "speed":
                self.speed = value
            case "autospeed":
                self.autospeed = value
            case "interpolation":
                self.interpolation = value
            case "use":
                self.use = value
            case "saturation":
                self.saturation = value
            case "saturationmin":
                self.satrange[0] = value
            case "saturationmax":
                self.satrange[1] = value
            case "value":
                self.value = value
            case "valuemin":
                self.valuerange[0] = value
            case "valuemax":
                self.valuerange[1] = value
            case "threshold":
                self.threshold = value
            case "gamma":
                self.gamma = value
            case "hscanstart":
                self.hscan[0] = value
            case "hscanend":
                self.hscan[1] = value
            case "vscanstart":
                self.vscan[0] = value
            case "vscanend":
                self.vscan[1] = value

    def _current(self, name: str):
        match name:
            case "speed":
                return self.speed
            case "autospeed":
                return self.autospeed
            case "interpolation":
                return self.interpolation
            case "use":
                return self.use
            case "saturation":
                return self.saturation
            case "saturationmin":
                return self.satrange[0]
            case "saturationmax":
                return self.satrange[1]
            case "value":
                return self.value
            case "valuemin":
                return self.valuerange[0]
            case "valuemax":
                return self.valuerange[1]
            case "threshold":
                return self.threshold
            case "gamma":
                return self.gamma
            case "hscanstart":
                return self.hscan[0]
            case "hscanend":
                return self.hscan[1]
            case "vscanstart":
                return self.vscan[0]
            case "vscanend":
                return self.vscan[1]
        raise KeyError(name)

    def _postprocess(self, name: str) -> None:
        match name:
            case "speed":
                self.speed = clamp(self.speed, 0.0, 100.0)
            case "autospeed":
                self.autospeed = max(self.autospeed, 0.0)
            case "saturation":
                self.saturation = max(self.saturation, 0.0)
            case "saturationmin":
                self.satrange[0] = clamp(self.satrange[0], 0.0, self.satrange[1])
            case "saturationmax":
                self.satrange[1] = clamp(self.satrange[1], self.satrange[0], 1.0)
            case "value":
                self.value = max(self.value, 0.0)
            case "valuemin":
                self.valuerange[0] = clamp(self.valuerange[0], 0.0, self.valuerange[1])
            case "valuemax":
                self.valuerange[1] = clamp(self.valuerange[1], self.valuerange[0], 1.0)
            case "threshold":
                self.threshold = clamp(self.threshold, 0, 255)
            case "gamma":
                self.gamma = max(self.gamma, 0.0)
                top = GAMMASIZE - 1.0
                self.gammacurve = [(i / top) ** self.gamma * top for i in range(GAMMASIZE)]
            case "hscanstart":
                self.hscan[0] = clamp(self.hscan[0], 0.0, self.hscan[1])
                self.set_scan_range(self.width, self.height)
            case "hscanend":
                self.hscan[1] = clamp(self.hscan[1], self.hscan[0], 100.0)
                self.set_scan_range(self.width, self.height)
            case "vscanstart":
                self.vscan[0] = clamp(self.vscan[0], 0.0, self.vscan[1])
                self.set_scan_range(self.width, self.height)
            case "vscanend":
                self.vscan[1] = clamp(self.vscan[1], self.vscan[0], 100.0)
                self.set_scan_range(self.width, self.height)

    def set_option(self, option: str) -> bool:
        """Apply an option string such as ``"speed 50"``.

        Returns whether the change has to be passed on to the server.
        """
        found = get_word(option)
        if found is None:
            raise OptionError("empty option")
        name, rest = found

        spec = _BY_NAME.get(name)
        if spec is None:
            raise OptionError(f"unknown option {name}")

        try:
            value = spec.parse(rest)
        except ValueError:
            raise OptionError(
                f"invalid value {rest} for option {name} with type {spec.type}"
            ) from None

        self._store(name, value)
        self._postprocess(name)
        return spec.sends

    def get_option(self, option: str) -> str:
        """The current value of the option named by the first word of ``option``."""
        found = get_word(option)
        if found is None:
            raise OptionError("empty option")
        name = found[0]
        if name not in _BY_NAME:
            raise OptionError("unknown option")
        return to_string(self._current(name))

    def set_scan_range(self, width: int, height: int) -> None:
        """Scale the scan area, given in percent, to a picture of ``width`` by ``height``."""
        self.width = width
        self.height = height
        self.hscanscaled = [round32(edge / 100.0 * (width - 1.0)) for edge in self.hscan]
        self.vscanscaled = [round32(edge / 100.0 * (height - 1.0)) for edge in self.vscan]

    def add_pixel(self, rgb) -> None:
        """Add one pixel (three 0..255 values) to the running average."""
        if any(component >= self.threshold for component in rgb[:3]):
            for i, component in enumerate(rgb[:3]):
                index = clamp(component, 0, GAMMASIZE - 1)
                self._rgb[i] += index if self.gamma == 1.0 else self.gammacurve[index]
        self.rgbcount += 1

    def get_rgb(self) -> tuple[float, float, float]:
        """Average of the pixels added since the last call, adjusted, as 0..1 floats."""
        if self.rgbcount == 0:
            self._rgb = [0.0, 0.0, 0.0]
            return (0.0, 0.0, 0.0)

        rgb = [clamp(total / self.rgbcount / 255.0, 0.0, 1.0) for total in self._rgb]
        self._rgb = [0.0, 0.0, 0.0]
        self.rgbcount = 0

        # set the speed from how fast the input changes; works best in sync mode
        if self.autospeed > 0.0:
            change = sum(abs(cur - prev) for cur, prev in zip(rgb, self._prevrgb)) / 3.0
            if change > 0.001:
                self.singlechange = clamp(change * self.autospeed / 10.0, 0.0, 1.0)
            else:
                self.singlechange = 0.0

        self._prevrgb = list(rgb)

        if (self.value != 1.0 or self.valuerange != [0.0, 1.0]
                or self.saturation != 1.0 or self.satrange != [0.0, 1.0]):
            rgb = self._adjust_hsv(rgb)

        return (rgb[0], rgb[1], rgb[2])

    def _adjust_hsv(self, rgb: list[float]) -> list[float]:
        red, green, blue = rgb
        high = max(red, green, blue)
        low = min(red, green, blue)

        if low == high:
            hue, sat, val = -1.0, 0.0, low
        else:
            delta = high - low
            if high == red:
                hue = 60.0 * ((green - blue) / delta) + 360.0
                while hue >= 360.0:
                    hue -= 360.0
            elif high == green:
                hue = 60.0 * ((blue - red) / delta) + 120.0
            else:
                hue = 60.0 * ((red - green) / delta) + 240.0
            sat = delta / high
            val = high

        sat = clamp(sat * self.saturation, self.satrange[0], self.satrange[1])
        val = clamp(val * self.value, self.valuerange[0], self.valuerange[1])

        if hue == -1.0:
            result = [val, val, val]
        else:
            sector = hue / 60.0
            whole = int(sector)
            frac = sector - whole
            p = val * (1.0 - sat)
            q = val * (1.0 - frac * sat)
            t = val * (1.0 - (1.0 - frac) * sat)
            result = list(
                ((val, t, p), (q, val, p), (p, val, t), (p, q, val), (t, p, val), (val, p, q))[
                    whole % 6
                ]
            )

        return [clamp(component, 0.0, 1.0) for component in result]