"""Error taxonomy for formatting calls and batch flushes."""

from __future__ import annotations

from enum import StrEnum


class ErrorCategory(StrEnum):
    MALFORMED_SPECIFIER = "malformed_specifier"
    UNSUPPORTED_TYPE = "unsupported_type"
    ROW_SHAPE = "row_shape"
    RENDER_OVERFLOW = "render_overflow"
    ARGUMENT = "argument"
    SINK = "sink"


class JustifyError(Exception):
    """Base class for every error raised by a justify batch."""

    category: ErrorCategory


class SpecifierError(JustifyError, ValueError):
    """A conversion specification could not be parsed."""

    category = ErrorCategory.MALFORMED_SPECIFIER

    def __init__(self, message: str, *, fmt: str, offset: int) -> None:
        super().__init__(f"{message} at offset {offset} in {fmt!r}")
        self.fmt = fmt
        self.offset = offset


class UnsupportedConversionError(JustifyError, ValueError):
    """The length modifier and conversion character do not form a known type."""

    category = ErrorCategory.UNSUPPORTED_TYPE

    def __init__(self, specification: str, length: str, conversion: str) -> None:
        modifier = length or "(none)"
        super().__init__(
            f"Unsupported conversion {specification!r}: length modifier "
            f"{modifier} cannot be combined with '{conversion}'."
        )
        self.specification = specification
        self.length = length
        self.conversion = conversion


class RowShapeError(JustifyError, ValueError):
    """A formatting call does not line up with the first row of its batch."""

    category = ErrorCategory.ROW_SHAPE

    def __init__(self, message: str, *, row: int) -> None:
        super().__init__(f"Row {row}: {message}")
        self.row = row


class RenderOverflowError(JustifyError):
    """A field rendered wider than the configured limit."""

    category = ErrorCategory.RENDER_OVERFLOW

    def __init__(self, specification: str, width: int, limit: int) -> None:
        super().__init__(
            f"Conversion {specification!r} rendered {width} characters; "
            f"the limit is {limit}."
        )
        self.specification = specification
        self.width = width
        self.limit = limit


class ArgumentCountError(JustifyError, TypeError):
    """Too few or too many values were passed to a formatting call."""

    category = ErrorCategory.ARGUMENT


class ArgumentTypeError(JustifyError, TypeError):
    """A value cannot be converted by the specifier it was matched with."""

    category = ErrorCategory.ARGUMENT


class SinkMismatchError(JustifyError):
    """A formatting call named a different sink than the open batch."""

    category = ErrorCategory.SINK
