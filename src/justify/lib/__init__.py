"""Core justify library exports."""

from justify.lib.grid import Atom, AtomKind, Grid
from justify.lib.specifier import Specifier, parse_specifier, split_format
from justify.lib.values import TaggedValue, ValueKind

__all__ = [
    "Atom",
    "AtomKind",
    "Grid",
    "Specifier",
    "TaggedValue",
    "ValueKind",
    "parse_specifier",
    "split_format",
]
