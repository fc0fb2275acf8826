"""Command-line argument conversion tests."""

from __future__ import annotations

import pytest

from justify.cli.coerce import (
    coerce_argument,
    consuming_specifiers,
    parse_float,
    parse_integer,
    unescape,
)
from justify.lib.specifier import parse_specifier, split_format


@pytest.mark.parametrize(
    "raw,expected",
    [
        pytest.param("42", 42, id="decimal"),
        pytest.param(" -7 ", -7, id="padded-negative"),
        pytest.param("0x1f", 31, id="hex"),
        pytest.param("017", 15, id="leading-zero-octal"),
        pytest.param("-017", -15, id="negative-octal"),
        pytest.param("0b101", 5, id="binary"),
        pytest.param("0", 0, id="zero"),
        pytest.param("'A", 65, id="quoted-char"),
        pytest.param('"é', 233, id="double-quoted-char"),
    ],
)
def test_parse_integer(raw: str, expected: int) -> None:
    assert parse_integer(raw) == expected


def test_parse_integer_rejects_words() -> None:
    with pytest.raises(ValueError, match="Invalid integer argument 'ten'"):
        parse_integer("ten")


@pytest.mark.parametrize(
    "raw,expected",
    [
        pytest.param("2.5", 2.5, id="decimal"),
        pytest.param("1e3", 1000.0, id="exponent"),
        pytest.param("0x10", 16.0, id="hex-integer"),
        pytest.param("'a", 97.0, id="quoted-char"),
    ],
)
def test_parse_float(raw: str, expected: float) -> None:
    assert parse_float(raw) == expected


def test_parse_float_rejects_words() -> None:
    with pytest.raises(ValueError, match="Invalid number argument"):
        parse_float("pi")


def test_unescape_processes_backslash_sequences() -> None:
    assert unescape("a\\tb\\n") == "a\tb\n"
    assert unescape("\\x41\\\\") == "A\\"
    assert unescape("café →") == "café →"


@pytest.mark.parametrize(
    "text,raw,expected",
    [
        pytest.param("%d", "12", 12, id="int"),
        pytest.param("%lu", "0x10", 16, id="unsigned-long"),
        pytest.param("%p", "4096", 4096, id="pointer"),
        pytest.param("%.2f", "1.5", 1.5, id="float"),
        pytest.param("%c", "xyz", "x", id="char-takes-first"),
        pytest.param("%s", "hello", "hello", id="string"),
    ],
)
def test_coerce_argument(text: str, raw: str, expected: object) -> None:
    spec, _ = parse_specifier(text, 1)

    assert coerce_argument(spec, raw) == expected


def test_coerce_char_needs_a_character() -> None:
    spec, _ = parse_specifier("%c", 1)

    with pytest.raises(ValueError, match="non-empty"):
        coerce_argument(spec, "")


def test_consuming_specifiers_skip_percent() -> None:
    consumers = consuming_specifiers(split_format("%d%% of %s\n"))

    assert [spec.original for spec in consumers] == ["%d", "%s"]
