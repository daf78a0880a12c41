"""Colour output and text formatting of evaluation values."""

from __future__ import annotations

import enum
import sys
from fractions import Fraction
from typing import Any, Optional, Protocol, TextIO, runtime_checkable

from .source import Location

FLOAT_PRECISION = 16
RESET_SEQUENCE = "\x1b[m"

_INT_MASK = (1 << 64) - 1
_INT_BASES = {
    2: ("0b", "b"),
    8: ("0", "o"),
    16: ("0x", "x"),
}


class Color(enum.Enum):
    """Terminal colours, valued by their ANSI SGR code."""

    DEFAULT = "39"
    BLACK = "30"
    WHITE = "97"

    DARK_RED = "31"
    DARK_GREEN = "32"
    DARK_YELLOW = "33"
    DARK_BLUE = "34"
    DARK_MAGENTA = "35"
    DARK_CYAN = "36"
    LIGHT_GRAY = "37"
    DARK_GRAY = "90"

    RED = "91"
    GREEN = "92"
    YELLOW = "93"
    BLUE = "94"
    MAGENTA = "95"
    CYAN = "96"

    @property
    def sequence(self) -> str:
        """The escape sequence that switches to this colour."""
        return f"\x1b[{self.value}m"


@runtime_checkable
class FunctionValue(Protocol):
    """A callable entity as seen by the value formatter."""

    name: str
    param_count: int


def _is_console(out: TextIO) -> bool:
    return out is sys.stdout or out is sys.stderr


def add_color(out: TextIO, color: Color) -> None:
    """Switch ``out`` to the given colour; only the console streams are coloured."""
    if _is_console(out):
        out.write(color.sequence)


def clear_color(out: TextIO) -> None:
    """Revert ``out`` to the default text style."""
    if _is_console(out):
        out.write(RESET_SEQUENCE)


def _format_float(value: float) -> str:
    return format(value, f".{FLOAT_PRECISION}g")


def _to_text(msg: Any) -> str:
    if isinstance(msg, bool):
        return "1" if msg else "0"
    if isinstance(msg, float):
        return _format_float(msg)
    if isinstance(msg, complex):
        return format_complex(msg)
    if isinstance(msg, Fraction):
        return format_fraction(msg)
    if isinstance(msg, Location):
        return format_location(msg)
    if isinstance(msg, FunctionValue) and not isinstance(msg, (str, bytes)):
        return format_function(msg)
    return str(msg)


def print_colored(out: TextIO, color: Color, msg: Any) -> None:
    """Write ``msg`` to ``out`` in the given colour."""
    add_color(out, color)
    out.write(_to_text(msg))
    clear_color(out)


def println_colored(out: TextIO, color: Color, msg: Any) -> None:
    """Write ``msg`` to ``out`` in the given colour, followed by a line feed."""
    print_colored(out, color, msg)
    out.write("\n")


def format_token(token: Any) -> str:
    """Return the text of a token."""
    return str(token.value)


def format_location(loc: Location) -> str:
    """Return ``<file>:line:col`` with one-based line and column."""
    where = str(loc.file) if loc else "Unknown"
    return f"<{where}>:{loc.line + 1}:{loc.col + 1}"


def format_complex(value: complex) -> str:
    """Return a complex number as ``(re + imi)``."""
    imag = value.imag
    sign = "+" if imag > 0 else "-"
    return f"({_format_float(value.real)} {sign} {_format_float(abs(imag))}i)"


def format_fraction(value: Fraction) -> str:
    """Return a fraction, splitting off its whole part as ``w(n/d)``."""
    sign = "-" if value < 0 else ""
    num = abs(value.numerator)
    den = value.denominator
    if den == 1:
        return f"{sign}{num}"

    whole, rest = divmod(num, den)
    if not whole:
        return f"{sign}{num}/{den}"
    if not rest:
        return f"{sign}{whole}"
    return f"{sign}{whole}({rest}/{den})"


def format_function(value: FunctionValue) -> str:
    """Return a function value as its name and parameter count."""
    return f"function: {value.name}( {value.param_count} )"


def format_entity_id(entity_id: int) -> str:
    """Return an entity id in upper-case hexadecimal."""
    return format(entity_id, "X")


def _format_int(value: int, base: int) -> str:
    if base == 10:
        return str(value)
    spec = _INT_BASES.get(base)
    if spec is None:
        return ""
    prefix, code = spec
    return prefix + format(value & _INT_MASK, code)


def format_value(value: Any, base: int = 10) -> str:
    """Return the text of an evaluation value; integers are shown in ``base``.

    Non-decimal integers are shown as their 64-bit two's complement
    pattern; a base other than 2, 8, 10 or 16 gives an empty string.
    """
    if value is None:
        return "<undef>"
    if isinstance(value, bool):
        return "_true" if value else "_false"
    if isinstance(value, int):
        return _format_int(value, base)
    if isinstance(value, (list, tuple)):
        return "[ " + ", ".join(format_value(item, base) for item in value) + " ]"
    return _to_text(value)


def print_value(value: Any, base: int = 10, out: Optional[TextIO] = None) -> None:
    """Write the text of an evaluation value to ``out`` (stdout by default)."""
    stream = out if out is not None else sys.stdout
    stream.write(format_value(value, base))