"""Atom grid, width equalization and specifier regeneration tests."""

from __future__ import annotations

import pytest

from justify.lib.errors import ErrorCategory, RowShapeError
from justify.lib.grid import AtomKind, Grid, equalize, regenerate
from justify.lib.specifier import Specifier, split_format
from justify.lib.values import capture


def _add_row(grid: Grid, fmt: str, *values: object) -> None:
    cursor = iter(values)
    grid.begin_row()
    try:
        for part in split_format(fmt):
            if isinstance(part, Specifier):
                tagged, width = capture(part, cursor)
                grid.append_conversion(part, tagged, width)
            else:
                grid.append_literal(part)
        grid.commit_row()
    except Exception:
        grid.discard_row()
        raise


def test_atoms_get_positional_identity() -> None:
    grid = Grid()
    _add_row(grid, "%s=%d\n", "x", 5)
    _add_row(grid, "%s=%d\n", "yy", 42)

    positions = [(atom.row, atom.column, atom.kind) for row in grid.rows for atom in row]

    assert positions == [
        (0, 0, AtomKind.CONVERSION),
        (0, 1, AtomKind.LITERAL),
        (0, 2, AtomKind.CONVERSION),
        (0, 3, AtomKind.LITERAL),
        (1, 0, AtomKind.CONVERSION),
        (1, 1, AtomKind.LITERAL),
        (1, 2, AtomKind.CONVERSION),
        (1, 3, AtomKind.LITERAL),
    ]
    assert grid.shape == (
        AtomKind.CONVERSION,
        AtomKind.LITERAL,
        AtomKind.CONVERSION,
        AtomKind.LITERAL,
    )


def test_columns_walk_top_to_bottom() -> None:
    grid = Grid()
    _add_row(grid, "%d|", 1)
    _add_row(grid, "%d|", 22)

    columns = list(grid.columns())

    assert [atom.natural_width for atom in columns[0]] == [1, 2]
    assert [atom.text for atom in columns[1]] == ["|", "|"]


def test_literal_text_may_differ_between_rows() -> None:
    grid = Grid()
    _add_row(grid, "a=%d\n", 1)
    _add_row(grid, "bbb=%d\n", 2)

    assert len(grid) == 2


def test_extra_field_is_rejected_without_commit() -> None:
    grid = Grid()
    _add_row(grid, "%d\n", 1)

    with pytest.raises(RowShapeError) as excinfo:
        _add_row(grid, "%d %d\n", 1, 2)

    assert excinfo.value.category is ErrorCategory.ROW_SHAPE
    assert excinfo.value.row == 1
    assert len(grid) == 1


def test_missing_field_is_rejected_without_commit() -> None:
    grid = Grid()
    _add_row(grid, "%d %d\n", 1, 2)

    with pytest.raises(RowShapeError, match="has 2 fields but the first row has 4"):
        _add_row(grid, "%d\n", 1)

    assert len(grid) == 1


def test_kind_mismatch_is_rejected() -> None:
    grid = Grid()
    _add_row(grid, "%d apples\n", 3)

    with pytest.raises(RowShapeError, match="field 0 is literal"):
        _add_row(grid, "apples %d\n", 3)

    assert len(grid) == 1


def test_empty_first_row_fixes_an_empty_shape() -> None:
    grid = Grid()
    _add_row(grid, "")
    _add_row(grid, "")

    with pytest.raises(RowShapeError):
        _add_row(grid, "text")

    assert len(grid) == 2


def test_grid_recovers_after_rejected_row() -> None:
    grid = Grid()
    _add_row(grid, "%d\n", 1)
    with pytest.raises(RowShapeError):
        _add_row(grid, "%d %d\n", 1, 2)

    _add_row(grid, "%d\n", 10)

    assert [row[0].natural_width for row in grid.rows] == [1, 2]


def test_begin_row_twice_is_a_usage_error() -> None:
    grid = Grid()
    grid.begin_row()

    with pytest.raises(RuntimeError):
        grid.begin_row()


def test_equalize_sets_column_maximum() -> None:
    grid = Grid()
    _add_row(grid, "%d %d %d\n", 1, 2, 3)
    _add_row(grid, "%d %d %d\n", 10, 20, 30)
    _add_row(grid, "%d %d %d\n", 100, 200, 300)

    equalize(grid)

    for column in grid.columns():
        if column[0].kind is AtomKind.LITERAL:
            assert all(atom.target_width is None for atom in column)
            continue
        widest = max(atom.natural_width for atom in column)
        assert all(atom.target_width == widest for atom in column)
        assert all(atom.target_width >= atom.natural_width for atom in column)


def test_equalize_keeps_unreserved_strings_natural() -> None:
    grid = Grid()
    _add_row(grid, "%s %5s\n", "x", "a")
    _add_row(grid, "%s %5s\n", "yyy", "abcdefg")

    equalize(grid)

    plain = [row[0].target_width for row in grid.rows]
    reserved = [row[2].target_width for row in grid.rows]
    assert plain == [1, 3]
    assert reserved == [7, 7]


def test_equalize_strings_switch_pads_every_string() -> None:
    grid = Grid()
    _add_row(grid, "%s\n", "x")
    _add_row(grid, "%s\n", "yyy")

    equalize(grid, equalize_strings=True)

    assert [row[0].target_width for row in grid.rows] == [3, 3]


def test_regenerate_substitutes_only_width() -> None:
    grid = Grid()
    _add_row(grid, "a=%07.4f b= %07.5Lf\n", 1.2, 1.2)
    _add_row(grid, "a=%07.4lf b= %07.5Lf\n", 1000.2222, 1000.2222)

    equalize(grid)
    regenerate(grid)

    new_specs = [
        [atom.new_spec.original for atom in row if atom.new_spec is not None]
        for row in grid.rows
    ]
    assert new_specs == [["%09.4f", "%010.5Lf"], ["%09.4lf", "%010.5Lf"]]


def test_regenerate_requires_equalized_grid() -> None:
    grid = Grid()
    _add_row(grid, "%d\n", 1)

    with pytest.raises(RuntimeError, match="has not been equalized"):
        regenerate(grid)


def test_clear_empties_grid() -> None:
    grid = Grid()
    _add_row(grid, "%d\n", 1)

    grid.clear()

    assert len(grid) == 0
    assert grid.shape is None
    assert list(grid.columns()) == []
