"""Plain-text table helper for diagnostic output."""

from __future__ import annotations

from collections.abc import Sequence


def tabular(
    rows: Sequence[Sequence[str]],
    *,
    right_align: frozenset[int] = frozenset(),
    sep: str = "  ",
) -> str:
    """Align cells to the widest entry of each column.

    >>> tabular([["row", "width"], ["0", "12"]], right_align=frozenset({1}))
    'row  width\\n0       12'
    """
    if not rows:
        return ""
    col_count = max(len(row) for row in rows)
    padded = [[*row, *([""] * (col_count - len(row)))] for row in rows]
    col_widths = [max(len(row[col]) for row in padded) for col in range(col_count)]

    lines: list[str] = []
    for row in padded:
        cells = [
            cell.rjust(col_widths[col]) if col in right_align else cell.ljust(col_widths[col])
            for col, cell in enumerate(row)
        ]
        lines.append(sep.join(cells).rstrip())
    return "\n".join(lines)
