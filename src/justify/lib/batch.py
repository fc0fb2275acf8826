"""Batch lifecycle: capture formatting calls, then emit them column-aligned."""

from __future__ import annotations

import logging
import sys
from collections.abc import Iterable
from typing import TYPE_CHECKING, TextIO

from justify.lib.config.settings import JustifyConfig
from justify.lib.diagnostics import dump_grid
from justify.lib.errors import ArgumentCountError, SinkMismatchError
from justify.lib.grid import Grid, equalize, regenerate
from justify.lib.specifier import split_format
from justify.lib.values import capture, render

if TYPE_CHECKING:
    from justify.lib.grid import Row

logger = logging.getLogger(__name__)

_EXHAUSTED = object()


class Justifier:
    """One pending batch of formatting calls bound to a single sink.

    The batch opens on the first formatting call and is emitted and discarded
    by `flush()`. A Justifier is not safe to share between threads.
    """

    def __init__(self, config: JustifyConfig | None = None) -> None:
        self._config = config or JustifyConfig()
        self._grid = Grid()
        self._sink: TextIO | None = None

    @property
    def config(self) -> JustifyConfig:
        return self._config

    @property
    def is_open(self) -> bool:
        return len(self._grid) > 0

    @property
    def row_count(self) -> int:
        return len(self._grid)

    @property
    def sink(self) -> TextIO | None:
        return self._sink

    def format(self, sink: TextIO, fmt: str, *values: object) -> None:
        """Capture one printf-style call; nothing is written until flush()."""

        self.vformat(sink, fmt, values)

    def vformat(self, sink: TextIO, fmt: str, values: Iterable[object]) -> None:
        """Like format(), with the values given as one iterable."""

        if self._sink is not None and sink is not self._sink:
            raise SinkMismatchError(
                "A batch is already open on another sink; flush() it first."
            )

        parts = split_format(fmt)
        cursor = iter(values)
        grid = self._grid
        grid.begin_row()
        try:
            for part in parts:
                if isinstance(part, str):
                    grid.append_literal(part)
                    continue
                tagged, natural_width = capture(
                    part, cursor, render_limit=self._config.render_limit
                )
                grid.append_conversion(part, tagged, natural_width)
            if next(cursor, _EXHAUSTED) is not _EXHAUSTED:
                raise ArgumentCountError(f"Too many values for format {fmt!r}.")
            row = grid.commit_row()
        except BaseException:
            grid.discard_row()
            raise

        if self._sink is None:
            self._sink = sink
            logger.debug("Batch opened.")
        logger.debug("Captured row %d with %d fields.", len(grid) - 1, len(row))

    def _prepare(self) -> None:
        equalize(self._grid, equalize_strings=self._config.equalize_strings)
        regenerate(self._grid)

    def _emit_row(self, sink: TextIO, row: Row) -> None:
        for atom in row:
            if not atom.is_conversion:
                sink.write(atom.text)
                continue
            if atom.new_spec is None or atom.value is None:
                raise RuntimeError(f"Conversion at column {atom.column} was not regenerated.")
            sink.write(render(atom.new_spec, atom.value))

    def flush(self) -> int:
        """Write the batch with aligned columns and discard it.

        Returns the number of rows written; 0 when no batch is open.
        """

        if not self.is_open or self._sink is None:
            return 0
        sink = self._sink
        rows = len(self._grid)
        try:
            self._prepare()
            for row in self._grid.rows:
                self._emit_row(sink, row)
        finally:
            self._grid.clear()
            self._sink = None
        logger.debug("Flushed %d rows.", rows)
        return rows

    def dump(self) -> str:
        """Describe the pending batch as it would be emitted by flush()."""

        if self.is_open:
            self._prepare()
        return dump_grid(self._grid)


_default_justifier = Justifier()


def default_justifier() -> Justifier:
    return _default_justifier


def printf(fmt: str, *values: object) -> None:
    _default_justifier.format(sys.stdout, fmt, *values)


def fprintf(sink: TextIO, fmt: str, *values: object) -> None:
    _default_justifier.format(sink, fmt, *values)


def vprintf(fmt: str, values: Iterable[object]) -> None:
    _default_justifier.vformat(sys.stdout, fmt, values)


def vfprintf(sink: TextIO, fmt: str, values: Iterable[object]) -> None:
    _default_justifier.vformat(sink, fmt, values)


def flush() -> int:
    return _default_justifier.flush()
