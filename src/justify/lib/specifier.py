"""Conversion specification parsing.

A conversion specification has the shape::

    %[flags][width][.precision][length]conversion

`parse_specifier` splits one specification into those five parts without
interpreting them. `split_format` walks a whole format string and returns
its literal runs and specifications in order.
"""

from __future__ import annotations

from dataclasses import dataclass, replace

from justify.lib.errors import SpecifierError

FLAG_CHARS = "#0- +'I"
# Longest match first so "hh" wins over "h" and "ll" over "l".
LENGTH_MODIFIERS: tuple[str, ...] = ("hh", "ll", "h", "l", "L", "q", "j", "z", "t")
CONVERSION_CHARS = frozenset("diouxXeEfFgGaAcCsSp%")
STRING_CONVERSIONS = frozenset("sS")


@dataclass(frozen=True, slots=True)
class Specifier:
    """One parsed conversion specification.

    Every part is the exact substring found in the format string and may be
    empty, except `conversion` which is always a single character.
    `precision` keeps its leading '.'.
    """

    flags: str
    width: str
    precision: str
    length: str
    conversion: str

    @property
    def original(self) -> str:
        return f"%{self.flags}{self.width}{self.precision}{self.length}{self.conversion}"

    @property
    def field_width(self) -> int:
        return int(self.width) if self.width else 0

    @property
    def precision_value(self) -> int | None:
        """Precision as a number, or None when absent. A bare '.' means 0."""

        if not self.precision:
            return None
        digits = self.precision[1:]
        return int(digits) if digits else 0

    @property
    def is_string(self) -> bool:
        return self.conversion in STRING_CONVERSIONS

    def with_width(self, width: int) -> Specifier:
        """Return the same specification with its width replaced.

        A zero width is dropped so the text never reads as the '0' flag.
        """

        return replace(self, width=str(width) if width else "")

    def __str__(self) -> str:
        return self.original


def _span(fmt: str, pos: int, accepted: str) -> int:
    while pos < len(fmt) and fmt[pos] in accepted:
        pos += 1
    return pos


def _digits(fmt: str, pos: int) -> int:
    while pos < len(fmt) and fmt[pos].isascii() and fmt[pos].isdigit():
        pos += 1
    return pos


def parse_specifier(fmt: str, pos: int) -> tuple[Specifier, int]:
    """Parse the specification whose '%' sits at `pos - 1`.

    Returns the specifier and the index just past its conversion character.
    """

    cursor = _span(fmt, pos, FLAG_CHARS)
    flags = fmt[pos:cursor]

    if fmt.startswith("*", cursor):
        raise SpecifierError("dynamic field width '*' is not supported", fmt=fmt, offset=cursor)
    start = cursor
    cursor = _digits(fmt, cursor)
    width = fmt[start:cursor]
    if width and fmt.startswith("$", cursor):
        raise SpecifierError(
            "positional argument '%n$' is not supported", fmt=fmt, offset=cursor
        )

    precision = ""
    if fmt.startswith(".", cursor):
        start = cursor
        if fmt.startswith("*", cursor + 1):
            raise SpecifierError(
                "dynamic precision '.*' is not supported", fmt=fmt, offset=cursor + 1
            )
        cursor = _digits(fmt, cursor + 1)
        precision = fmt[start:cursor]

    length = ""
    for modifier in LENGTH_MODIFIERS:
        if fmt.startswith(modifier, cursor):
            length = modifier
            cursor += len(modifier)
            break

    if cursor >= len(fmt):
        raise SpecifierError("missing conversion character", fmt=fmt, offset=cursor)
    conversion = fmt[cursor]
    if conversion == "n":
        raise SpecifierError("write-back conversion '%n' is not supported", fmt=fmt, offset=cursor)
    if conversion not in CONVERSION_CHARS:
        raise SpecifierError(
            f"unknown conversion character {conversion!r}", fmt=fmt, offset=cursor
        )

    return Specifier(flags, width, precision, length, conversion), cursor + 1


def split_format(fmt: str) -> list[str | Specifier]:
    """Split a format string into literal text runs and specifiers.

    >>> [str(part) for part in split_format("%-4s=%ld")]
    ['%-4s', '=', '%ld']
    """

    parts: list[str | Specifier] = []
    pos = 0
    while pos < len(fmt):
        percent = fmt.find("%", pos)
        if percent == -1:
            parts.append(fmt[pos:])
            break
        if percent > pos:
            parts.append(fmt[pos:percent])
        spec, pos = parse_specifier(fmt, percent + 1)
        parts.append(spec)
    return parts
