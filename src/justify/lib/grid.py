"""Two-dimensional atom grid for one pending batch.

Each formatting call contributes one row; each field of the format string
becomes one atom in that row. A column is the set of atoms sharing an index
across rows, so column identity is positional and no atom is linked to any
other.
"""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from dataclasses import dataclass
from enum import StrEnum
from typing import TypeAlias

from justify.lib.errors import RowShapeError
from justify.lib.specifier import Specifier
from justify.lib.values import TaggedValue


class AtomKind(StrEnum):
    LITERAL = "literal"
    CONVERSION = "conversion"


@dataclass(slots=True)
class Atom:
    """One field of one formatting call.

    `row` and `column` are fixed at creation. `target_width` and `new_spec`
    stay None until the batch is equalized and regenerated.
    """

    kind: AtomKind
    row: int
    column: int
    text: str = ""
    spec: Specifier | None = None
    value: TaggedValue | None = None
    natural_width: int = 0
    target_width: int | None = None
    new_spec: Specifier | None = None

    @property
    def is_conversion(self) -> bool:
        return self.kind is AtomKind.CONVERSION

    @property
    def reserves_width(self) -> bool:
        """False for string conversions written without an explicit width."""

        return self.spec is not None and (not self.spec.is_string or bool(self.spec.width))


Row: TypeAlias = tuple[Atom, ...]


class Grid:
    """Append-only arena of rows, cleared as a whole on flush."""

    def __init__(self) -> None:
        self._rows: list[Row] = []
        self._pending: list[Atom] | None = None

    @property
    def rows(self) -> Sequence[Row]:
        return tuple(self._rows)

    @property
    def shape(self) -> tuple[AtomKind, ...] | None:
        """Kind of each column, taken from the first row."""

        if not self._rows:
            return None
        return tuple(atom.kind for atom in self._rows[0])

    def __len__(self) -> int:
        return len(self._rows)

    def begin_row(self) -> None:
        if self._pending is not None:
            raise RuntimeError("begin_row() called while another row is pending.")
        self._pending = []

    def _append(self, kind: AtomKind) -> Atom:
        if self._pending is None:
            raise RuntimeError("append called without begin_row().")
        row = len(self._rows)
        column = len(self._pending)
        shape = self.shape
        if shape is not None:
            if column >= len(shape):
                self._pending = None
                raise RowShapeError(
                    f"has more than the {len(shape)} fields of the first row.", row=row
                )
            if shape[column] is not kind:
                self._pending = None
                raise RowShapeError(
                    f"field {column} is {kind} but the first row has {shape[column]} there.",
                    row=row,
                )
        atom = Atom(kind=kind, row=row, column=column)
        self._pending.append(atom)
        return atom

    def append_literal(self, text: str) -> Atom:
        atom = self._append(AtomKind.LITERAL)
        atom.text = text
        return atom

    def append_conversion(self, spec: Specifier, value: TaggedValue, natural_width: int) -> Atom:
        atom = self._append(AtomKind.CONVERSION)
        atom.spec = spec
        atom.value = value
        atom.natural_width = natural_width
        return atom

    def commit_row(self) -> Row:
        if self._pending is None:
            raise RuntimeError("commit_row() called without begin_row().")
        pending, self._pending = self._pending, None
        shape = self.shape
        if shape is not None and len(pending) != len(shape):
            raise RowShapeError(
                f"has {len(pending)} fields but the first row has {len(shape)}.",
                row=len(self._rows),
            )
        row = tuple(pending)
        self._rows.append(row)
        return row

    def discard_row(self) -> None:
        self._pending = None

    def columns(self) -> Iterator[Row]:
        """Yield each column top to bottom."""

        return zip(*self._rows, strict=True)

    def conversions(self) -> Iterator[Atom]:
        for row in self._rows:
            for atom in row:
                if atom.is_conversion:
                    yield atom

    def clear(self) -> None:
        self._rows.clear()
        self._pending = None


def equalize(grid: Grid, *, equalize_strings: bool = False) -> None:
    """Assign every conversion atom the widest natural width in its column.

    String conversions without an explicit width keep their natural width
    unless `equalize_strings` is set.
    """

    for column in grid.columns():
        if not column[0].is_conversion:
            continue
        widest = max(atom.natural_width for atom in column)
        for atom in column:
            if equalize_strings or atom.reserves_width:
                atom.target_width = widest
            else:
                atom.target_width = atom.natural_width


def regenerate(grid: Grid) -> None:
    """Rebuild each conversion's specifier with its column's target width."""

    for atom in grid.conversions():
        if atom.spec is None or atom.target_width is None:
            raise RuntimeError(
                f"Atom at row {atom.row}, column {atom.column} has not been equalized."
            )
        atom.new_spec = atom.spec.with_width(atom.target_width)
