"""Small text and number helpers shared by the rest of the package."""

from __future__ import annotations

import locale
import math
import re
import sys

_WS = r"[ \t\n\v\f\r]*"

_INT_RE = re.compile(_WS + r"([+-]?)(0[xX][0-9a-fA-F]+|0[0-7]*|[1-9][0-9]*)")
_HEX_RE = re.compile(_WS + r"([+-]?)(?:0[xX])?([0-9a-fA-F]+)")
_FLOAT_RE = re.compile(
    _WS
    + r"([+-]?(?:inf(?:inity)?|nan"
    + r"|(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?))",
    re.IGNORECASE,
)

_TRUE_WORDS = frozenset({"1", "true", "on", "yes"})
_FALSE_WORDS = frozenset({"0", "false", "off", "no"})


def print_error(error: str) -> None:
    """Write an error line to standard error."""
    sys.stderr.write(f"ERROR: {error}\n")


def get_word(data: str) -> tuple[str, str] | None:
    """Split the first whitespace-separated word off ``data``.

    Returns ``(word, rest)`` where ``rest`` is what follows the word, or an
    empty string when only whitespace follows. Returns ``None`` when ``data``
    holds no word at all.
    """
    parts = data.split(maxsplit=1)
    if not parts:
        return None
    word = parts[0]
    rest = data[data.find(word) + len(word):]
    if not rest.strip():
        rest = ""
    return word, rest


def convert_float_locale(text: str) -> str:
    """Replace every ``.`` and ``,`` with the current locale's decimal point."""
    point = locale.localeconv()["decimal_point"] or "."
    return text.replace(",", point).replace(".", point) if point != "." else text.replace(",", ".")


def to_string(value: object) -> str:
    """Render a value the way a default-formatted stream would, first word only."""
    if isinstance(value, bool):
        return "1" if value else "0"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        return format(value, ".6g")
    found = get_word(str(value))
    return found[0] if found else ""


def clamp(value, low, high):
    """Limit ``value`` to the range ``low``..``high``; ``high`` wins on conflict."""
    if not value < high:
        return high
    return value if value > low else low


def round32(value: float) -> int:
    """Round to the nearest integer, halves away from zero."""
    magnitude = abs(value)
    whole = math.floor(magnitude)
    if magnitude - whole >= 0.5:
        whole += 1
    return -whole if value < 0 else whole


def str_to_int(data: str) -> int:
    """Parse a leading integer with C ``%i`` rules (decimal, ``0x`` hex, ``0`` octal)."""
    match = _INT_RE.match(data)
    if not match:
        raise ValueError(f"not an integer: {data!r}")
    sign, digits = match.groups()
    if digits[:2] in ("0x", "0X"):
        number = int(digits[2:], 16)
    elif digits.startswith("0"):
        number = int(digits, 8)
    else:
        number = int(digits)
    return -number if sign == "-" else number


def hex_str_to_int(data: str) -> int:
    """Parse a leading hexadecimal integer, with or without a ``0x`` prefix."""
    match = _HEX_RE.match(data)
    if not match:
        raise ValueError(f"not a hexadecimal integer: {data!r}")
    sign, digits = match.groups()
    number = int(digits, 16)
    return -number if sign == "-" else number


def str_to_float(data: str) -> float:
    """Parse a leading floating point number."""
    match = _FLOAT_RE.match(data)
    if not match:
        raise ValueError(f"not a number: {data!r}")
    return float(match.group(1))


def str_to_bool(data: str) -> bool:
    """Parse the first word of ``data`` as a boolean.

    Accepts 1/true/on/yes, 0/false/off/no, or any integer (non-zero is true).
    """
    found = get_word(data)
    if found is None:
        raise ValueError(f"not a boolean: {data!r}")
    word = found[0]
    if word in _TRUE_WORDS:
        return True
    if word in _FALSE_WORDS:
        return False
    try:
        return str_to_int(word) != 0
    except ValueError:
        raise ValueError(f"not a boolean: {data!r}") from None