"""Grid dump and table helper tests."""

from __future__ import annotations

from justify.lib.diagnostics import dump_grid
from justify.lib.formatting import tabular
from justify.lib.grid import Grid, equalize, regenerate
from justify.lib.specifier import parse_specifier
from justify.lib.values import capture


def _grid_with(*numbers: int) -> Grid:
    spec, _ = parse_specifier("%d", 1)
    grid = Grid()
    for number in numbers:
        grid.begin_row()
        tagged, width = capture(spec, iter([number]))
        grid.append_conversion(spec, tagged, width)
        grid.append_literal("\n")
        grid.commit_row()
    return grid


def test_tabular_pads_ragged_rows() -> None:
    text = tabular([["a", "bb", "c"], ["dddd"]], right_align=frozenset({1}))

    assert text.splitlines() == ["a     bb  c", "dddd"]


def test_tabular_empty() -> None:
    assert tabular([]) == ""


def test_dump_before_equalize_shows_placeholders() -> None:
    lines = dump_grid(_grid_with(5, 1234)).splitlines()

    assert lines[0].split() == ["row", "col", "kind", "field", "type", "natural", "target", "emit", "as"]
    assert lines[1].split() == ["0", "0", "conversion", "%d", "int", "1", "-", "-"]
    assert lines[2].split() == ["0", "1", "literal", "'\\n'"]
    assert len(lines) == 5


def test_dump_after_regenerate_shows_new_specifier() -> None:
    grid = _grid_with(5, 1234)
    equalize(grid)
    regenerate(grid)

    lines = dump_grid(grid).splitlines()

    assert lines[1].split() == ["0", "0", "conversion", "%d", "int", "1", "4", "%4d"]
    assert lines[3].split() == ["1", "0", "conversion", "%d", "int", "4", "4", "%4d"]
