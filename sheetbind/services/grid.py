from __future__ import annotations

from typing import Any

"""Grid normalization and spreadsheet cell labels.

Data sources omit trailing blank cells, so rows of one sheet come back ragged.
normalize_grid() pads them in place so column-index lookups never go out of
bounds.
"""

__all__ = [
    "normalize_grid",
    "column_label",
    "cell_label",
]


def normalize_grid(grid: list[list[Any]]) -> list[list[Any]]:
    """Pad every row with "" to the width of the widest row (in place)."""
    width = max((len(row) for row in grid), default=0)
    for row in grid:
        if len(row) < width:
            row.extend([""] * (width - len(row)))
    return grid


def column_label(index: int) -> str:
    """Zero-based column index -> spreadsheet label (0 -> A, 26 -> AA, 701 -> ZZ)."""
    if index < 0:
        raise ValueError(f"column index must be >= 0, got {index}")
    n = index + 1
    label = ""
    while n > 0:
        n, rem = divmod(n - 1, 26)
        label = chr(ord("A") + rem) + label
    return label


def cell_label(column_index: int, row: int) -> str:
    return f"{column_label(column_index)}{row}"
