"""Human-readable dump of a pending grid."""

from __future__ import annotations

from justify.lib.formatting import tabular
from justify.lib.grid import Grid

_HEADER = ["row", "col", "kind", "field", "type", "natural", "target", "emit as"]
_NUMERIC_COLUMNS = frozenset({0, 1, 5, 6})


def dump_grid(grid: Grid) -> str:
    """One line per atom: its position, source text and widths."""

    lines = [_HEADER]
    for row in grid.rows:
        for atom in row:
            if not atom.is_conversion or atom.spec is None:
                cells = [str(atom.row), str(atom.column), str(atom.kind), repr(atom.text)]
                lines.append([*cells, "", "", "", ""])
                continue
            lines.append(
                [
                    str(atom.row),
                    str(atom.column),
                    str(atom.kind),
                    atom.spec.original,
                    str(atom.value.kind) if atom.value is not None else "",
                    str(atom.natural_width),
                    "-" if atom.target_width is None else str(atom.target_width),
                    "-" if atom.new_spec is None else atom.new_spec.original,
                ]
            )
    return tabular(lines, right_align=_NUMERIC_COLUMNS)
