"""Argument capture and rendering for conversion specifications.

Each conversion pulls exactly one value from the caller's argument cursor.
The (length modifier, conversion character) pair selects a `ValueKind`
following C's printf promotion rules on an LP64 host, and the value is
normalized the way printf would see it: integers wrap to their width class,
characters become one-character strings, addresses become integers.

The captured value is rendered once through its original specification to
learn its natural width. The same renderer replays it at flush time through
the widened specification.
"""

from __future__ import annotations

import math
import operator
from collections.abc import Iterator
from dataclasses import dataclass
from enum import StrEnum

from justify.lib.errors import (
    ArgumentCountError,
    ArgumentTypeError,
    RenderOverflowError,
    UnsupportedConversionError,
)
from justify.lib.specifier import Specifier

# Widest conversion that fits a 4096-byte C scratch buffer.
DEFAULT_RENDER_LIMIT = 4094


class ValueKind(StrEnum):
    SIGNED_CHAR = "signed char"
    SHORT = "short"
    INT = "int"
    LONG = "long"
    LONG_LONG = "long long"
    INTMAX = "intmax_t"
    SSIZE = "ssize_t"
    PTRDIFF = "ptrdiff_t"
    UNSIGNED_CHAR = "unsigned char"
    UNSIGNED_SHORT = "unsigned short"
    UNSIGNED_INT = "unsigned int"
    UNSIGNED_LONG = "unsigned long"
    UNSIGNED_LONG_LONG = "unsigned long long"
    UINTMAX = "uintmax_t"
    SIZE = "size_t"
    UNSIGNED_PTRDIFF = "unsigned ptrdiff_t"
    DOUBLE = "double"
    LONG_DOUBLE = "long double"
    CHAR = "char"
    WIDE_CHAR = "wint_t"
    STRING = "char*"
    WIDE_STRING = "wchar_t*"
    ADDRESS = "void*"
    PERCENT = "%"


# (bits, signed) after printf's own conversion of the promoted argument.
INTEGER_KINDS: dict[ValueKind, tuple[int, bool]] = {
    ValueKind.SIGNED_CHAR: (8, True),
    ValueKind.SHORT: (16, True),
    ValueKind.INT: (32, True),
    ValueKind.LONG: (64, True),
    ValueKind.LONG_LONG: (64, True),
    ValueKind.INTMAX: (64, True),
    ValueKind.SSIZE: (64, True),
    ValueKind.PTRDIFF: (64, True),
    ValueKind.UNSIGNED_CHAR: (8, False),
    ValueKind.UNSIGNED_SHORT: (16, False),
    ValueKind.UNSIGNED_INT: (32, False),
    ValueKind.UNSIGNED_LONG: (64, False),
    ValueKind.UNSIGNED_LONG_LONG: (64, False),
    ValueKind.UINTMAX: (64, False),
    ValueKind.SIZE: (64, False),
    ValueKind.UNSIGNED_PTRDIFF: (64, False),
}
FLOAT_KINDS = frozenset({ValueKind.DOUBLE, ValueKind.LONG_DOUBLE})
CHAR_KINDS = frozenset({ValueKind.CHAR, ValueKind.WIDE_CHAR})
STRING_KINDS = frozenset({ValueKind.STRING, ValueKind.WIDE_STRING})
ADDRESS_BITS = 64
_NULL_STRING = "(null)"

_SIGNED_BY_LENGTH: dict[str, ValueKind] = {
    "hh": ValueKind.SIGNED_CHAR,
    "h": ValueKind.SHORT,
    "": ValueKind.INT,
    "l": ValueKind.LONG,
    "ll": ValueKind.LONG_LONG,
    "q": ValueKind.LONG_LONG,
    "j": ValueKind.INTMAX,
    "z": ValueKind.SSIZE,
    "t": ValueKind.PTRDIFF,
}
_UNSIGNED_BY_LENGTH: dict[str, ValueKind] = {
    "hh": ValueKind.UNSIGNED_CHAR,
    "h": ValueKind.UNSIGNED_SHORT,
    "": ValueKind.UNSIGNED_INT,
    "l": ValueKind.UNSIGNED_LONG,
    "ll": ValueKind.UNSIGNED_LONG_LONG,
    "q": ValueKind.UNSIGNED_LONG_LONG,
    "j": ValueKind.UINTMAX,
    "z": ValueKind.SIZE,
    "t": ValueKind.UNSIGNED_PTRDIFF,
}


def _build_promotion_table() -> dict[tuple[str, str], ValueKind]:
    table: dict[tuple[str, str], ValueKind] = {
        ("", "c"): ValueKind.CHAR,
        ("l", "c"): ValueKind.WIDE_CHAR,
        ("", "C"): ValueKind.WIDE_CHAR,
        ("", "s"): ValueKind.STRING,
        ("l", "s"): ValueKind.WIDE_STRING,
        ("", "S"): ValueKind.WIDE_STRING,
        ("", "p"): ValueKind.ADDRESS,
        ("", "%"): ValueKind.PERCENT,
    }
    for conversion in "di":
        for length, kind in _SIGNED_BY_LENGTH.items():
            table[(length, conversion)] = kind
    for conversion in "ouxX":
        for length, kind in _UNSIGNED_BY_LENGTH.items():
            table[(length, conversion)] = kind
    for conversion in "fFeEgGaA":
        table[("", conversion)] = ValueKind.DOUBLE
        table[("l", conversion)] = ValueKind.DOUBLE
        table[("L", conversion)] = ValueKind.LONG_DOUBLE
    return table


PROMOTION_TABLE: dict[tuple[str, str], ValueKind] = _build_promotion_table()


@dataclass(frozen=True, slots=True)
class TaggedValue:
    """A captured argument together with the C type printf reads it as."""

    kind: ValueKind
    value: object = None


def lookup_kind(spec: Specifier) -> ValueKind:
    """Return the value kind for a specifier or raise if the pair is unknown."""

    kind = PROMOTION_TABLE.get((spec.length, spec.conversion))
    if kind is None:
        raise UnsupportedConversionError(spec.original, spec.length, spec.conversion)
    return kind


def wrap_integer(number: int, bits: int, signed: bool) -> int:
    """Reduce an integer to a C integer of the given width."""

    number &= (1 << bits) - 1
    if signed and number >> (bits - 1):
        number -= 1 << bits
    return number


def _type_error(spec: Specifier, raw: object, expected: str) -> ArgumentTypeError:
    return ArgumentTypeError(
        f"Conversion {spec.original!r} expects {expected}, got "
        f"{type(raw).__name__} ({raw!r})."
    )


def _coerce_integer(spec: Specifier, kind: ValueKind, raw: object) -> int:
    bits, signed = INTEGER_KINDS[kind]
    try:
        number = operator.index(raw)
    except TypeError:
        raise _type_error(spec, raw, "an integer") from None
    return wrap_integer(number, bits, signed)


def _coerce_float(spec: Specifier, raw: object) -> float:
    if isinstance(raw, str | bytes):
        raise _type_error(spec, raw, "a real number")
    try:
        return float(raw)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        raise _type_error(spec, raw, "a real number") from None


def _coerce_char(spec: Specifier, kind: ValueKind, raw: object) -> str:
    if isinstance(raw, str):
        if len(raw) != 1:
            raise _type_error(spec, raw, "a single character")
        return raw
    try:
        code = operator.index(raw)
    except TypeError:
        raise _type_error(spec, raw, "a character or code point") from None
    if kind is ValueKind.CHAR:
        return chr(code & 0xFF)
    if not 0 <= code <= 0x10FFFF:
        raise _type_error(spec, raw, "a Unicode code point")
    return chr(code)


def _coerce_string(spec: Specifier, raw: object) -> str | None:
    if raw is None or isinstance(raw, str):
        return raw
    if isinstance(raw, bytes):
        return raw.decode("utf-8", errors="replace")
    raise _type_error(spec, raw, "a string")


def _coerce_address(spec: Specifier, raw: object) -> int | None:
    if raw is None:
        return None
    if isinstance(raw, str | bytes | float):
        raise _type_error(spec, raw, "an address or object")
    try:
        address = operator.index(raw)
    except TypeError:
        address = id(raw)
    return address & ((1 << ADDRESS_BITS) - 1)


def coerce_value(spec: Specifier, kind: ValueKind, raw: object) -> TaggedValue:
    """Normalize one raw argument to the value printf would read for `kind`."""

    if kind in INTEGER_KINDS:
        return TaggedValue(kind, _coerce_integer(spec, kind, raw))
    if kind in FLOAT_KINDS:
        return TaggedValue(kind, _coerce_float(spec, raw))
    if kind in CHAR_KINDS:
        return TaggedValue(kind, _coerce_char(spec, kind, raw))
    if kind in STRING_KINDS:
        return TaggedValue(kind, _coerce_string(spec, raw))
    if kind is ValueKind.ADDRESS:
        return TaggedValue(kind, _coerce_address(spec, raw))
    return TaggedValue(kind)


def _justify(lead: str, body: str, width: int, flags: str, *, zero_fill: bool) -> str:
    # Zero padding goes between the sign/prefix and the digits.
    if len(lead) + len(body) >= width:
        return lead + body
    if "-" in flags:
        return (lead + body).ljust(width)
    if zero_fill and "0" in flags:
        return lead + body.rjust(width - len(lead), "0")
    return (lead + body).rjust(width)


def _sign(negative: bool, flags: str) -> str:
    if negative:
        return "-"
    if "+" in flags:
        return "+"
    if " " in flags:
        return " "
    return ""


def _render_integer(spec: Specifier, number: int, signed: bool) -> str:
    conversion = spec.conversion
    magnitude = abs(number)
    digits = format(magnitude, {"o": "o", "x": "x", "X": "X"}.get(conversion, "d"))
    precision = spec.precision_value
    if precision is not None:
        if precision == 0 and magnitude == 0:
            digits = ""
        digits = digits.rjust(precision, "0")

    prefix = ""
    if "#" in spec.flags:
        if conversion == "o" and not digits.startswith("0"):
            digits = "0" + digits
        elif conversion in "xX" and magnitude:
            prefix = "0" + conversion
    sign = _sign(number < 0, spec.flags) if signed else ""
    return _justify(
        sign + prefix, digits, spec.field_width, spec.flags, zero_fill=precision is None
    )


def _round_hex_digits(lead: str, fraction: str, precision: int) -> tuple[str, str]:
    if precision >= len(fraction):
        return lead, fraction.ljust(precision, "0")
    shift = 4 * (len(fraction) - precision)
    quotient, remainder = divmod(int(lead + fraction, 16), 1 << shift)
    half = 1 << (shift - 1)
    if remainder > half or (remainder == half and quotient & 1):
        quotient += 1
    text = format(quotient, "x").rjust(precision + 1, "0")
    if precision == 0:
        return text, ""
    return text[:-precision], text[-precision:]


def _render_hex_float(spec: Specifier, number: float) -> str:
    upper = spec.conversion == "A"
    sign = _sign(math.copysign(1.0, number) < 0, spec.flags)
    if math.isnan(number) or math.isinf(number):
        body = "nan" if math.isnan(number) else "inf"
        body = body.upper() if upper else body
        return _justify(sign, body, spec.field_width, spec.flags, zero_fill=False)

    mantissa, _, exponent = float.hex(abs(number))[2:].partition("p")
    lead, _, fraction = mantissa.partition(".")
    precision = spec.precision_value
    if precision is None:
        fraction = fraction.rstrip("0")
    else:
        lead, fraction = _round_hex_digits(lead, fraction, precision)
    point = "." if fraction or "#" in spec.flags else ""
    body = f"{lead}{point}{fraction}p{exponent}"
    prefix = "0x"
    if upper:
        body, prefix = body.upper(), prefix.upper()
    return _justify(sign + prefix, body, spec.field_width, spec.flags, zero_fill=True)


def _render_float(spec: Specifier, number: float) -> str:
    if spec.conversion in "aA":
        return _render_hex_float(spec, number)
    # The thousands-grouping and locale-digit flags have no effect in the C locale.
    # Non-finite values are space padded even under the '0' flag.
    dropped = "'I" if math.isfinite(number) else "'I0"
    flags = "".join(flag for flag in spec.flags if flag not in dropped)
    return f"%{flags}{spec.width}{spec.precision}{spec.conversion}" % number


def render(spec: Specifier, tagged: TaggedValue) -> str:
    """Render a captured value through a specifier, as printf would."""

    kind = tagged.kind
    value = tagged.value
    if kind is ValueKind.PERCENT:
        return "%"
    if kind in INTEGER_KINDS:
        _, signed = INTEGER_KINDS[kind]
        return _render_integer(spec, operator.index(value), signed)  # type: ignore[arg-type]
    if kind in FLOAT_KINDS:
        return _render_float(spec, float(value))  # type: ignore[arg-type]
    if kind in CHAR_KINDS:
        return _justify("", str(value), spec.field_width, spec.flags, zero_fill=False)
    if kind in STRING_KINDS:
        precision = spec.precision_value
        if value is None:
            # glibc prints nothing rather than a clipped "(null)".
            text = "" if precision is not None and precision < len(_NULL_STRING) else _NULL_STRING
        else:
            text = str(value)
            if precision is not None:
                text = text[:precision]
        return _justify("", text, spec.field_width, spec.flags, zero_fill=False)
    if value is None:
        return _justify("", "(nil)", spec.field_width, spec.flags, zero_fill=False)
    return _justify(
        _sign(False, spec.flags), f"0x{value:x}", spec.field_width, spec.flags, zero_fill=False
    )


def capture(
    spec: Specifier,
    cursor: Iterator[object],
    *,
    render_limit: int = DEFAULT_RENDER_LIMIT,
) -> tuple[TaggedValue, int]:
    """Consume the value for `spec` from `cursor` and measure its natural width."""

    kind = lookup_kind(spec)
    if kind is ValueKind.PERCENT:
        tagged = TaggedValue(kind)
    else:
        try:
            raw = next(cursor)
        except StopIteration:
            raise ArgumentCountError(
                f"Missing value for conversion {spec.original!r}."
            ) from None
        tagged = coerce_value(spec, kind, raw)

    # Refuse runaway widths before building the string.
    requested = max(spec.field_width, spec.precision_value or 0)
    if requested > render_limit:
        raise RenderOverflowError(spec.original, requested, render_limit)
    natural_width = len(render(spec, tagged))
    if natural_width > render_limit:
        raise RenderOverflowError(spec.original, natural_width, render_limit)
    return tagged, natural_width
