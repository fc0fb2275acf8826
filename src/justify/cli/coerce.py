"""Turn command-line strings into values for conversion specifiers."""

from __future__ import annotations

import re

from justify.lib.specifier import Specifier
from justify.lib.values import (
    CHAR_KINDS,
    FLOAT_KINDS,
    INTEGER_KINDS,
    ValueKind,
    lookup_kind,
)

_OCTAL_RE = re.compile(r"[+-]?0[0-7]+")


def unescape(text: str) -> str:
    """Process backslash escapes such as \\n, \\t and \\x41."""

    return text.encode("latin-1", "backslashreplace").decode("unicode_escape")


def parse_integer(raw: str) -> int:
    """Parse an integer the way printf(1) does.

    Accepts decimal, 0x/0o/0b prefixes, a leading 0 for octal, and a leading
    quote for the code point of the next character.
    """

    text = raw.strip()
    if text[:1] in {"'", '"'} and len(text) > 1:
        return ord(text[1])
    if _OCTAL_RE.fullmatch(text):
        return int(text, 8)
    try:
        return int(text, 0)
    except ValueError:
        raise ValueError(f"Invalid integer argument {raw!r}.") from None


def parse_float(raw: str) -> float:
    text = raw.strip()
    if text[:1] in {"'", '"'} and len(text) > 1:
        return float(ord(text[1]))
    try:
        return float(text)
    except ValueError:
        pass
    try:
        return float(int(text, 0))
    except ValueError:
        raise ValueError(f"Invalid number argument {raw!r}.") from None


def coerce_argument(spec: Specifier, raw: str) -> object:
    """Convert one string argument to the Python value `spec` consumes."""

    kind = lookup_kind(spec)
    if kind in INTEGER_KINDS or kind is ValueKind.ADDRESS:
        return parse_integer(raw)
    if kind in FLOAT_KINDS:
        return parse_float(raw)
    if kind in CHAR_KINDS:
        if not raw:
            raise ValueError(f"Conversion {spec.original!r} needs a non-empty argument.")
        return raw[0]
    return raw


def consuming_specifiers(parts: list[str | Specifier]) -> list[Specifier]:
    """Specifiers in a split format that take an argument."""

    return [
        part
        for part in parts
        if isinstance(part, Specifier) and lookup_kind(part) is not ValueKind.PERCENT
    ]
