from __future__ import annotations

from collections.abc import Iterator, Sequence
from typing import Any

from ..errors import MappingError, SheetBindError
from ..models.binding import ColumnMapping
from ..models.row_result import RowResult
from .cancel import CancelScope
from .grid import cell_label
from .walker import new_record

"""Row materializer.

Applies resolved ColumnMappings to each data row of a rectangular grid and
yields one RowResult per row, lazily. A cell fault rejects only its own row.
Optional nested records are allocated only once a leaf beneath them receives
a present value.
"""

__all__ = [
    "FIRST_DATA_ROW",
    "materialize_rows",
]

# header is row 1 in spreadsheet numbering
FIRST_DATA_ROW = 2


def _assign(root: Any, path: tuple[str, ...], value: Any) -> None:
    owner = root
    for name in path[:-1]:
        owner = getattr(owner, name)
    object.__setattr__(owner, path[-1], value)


def _materialize_row(
    record_type: type,
    mappings: Sequence[ColumnMapping],
    row: Sequence[Any],
    row_index: int,
    *,
    sheet_name: str,
    datetime_formats: Sequence[str],
) -> RowResult[Any]:
    item = new_record(record_type)
    for m in mappings:
        b = m.binding
        cell = row[m.column_index]
        cv = "" if cell is None else str(cell)
        try:
            value, present = b.convert(cv, datetime_formats)  # type: ignore[misc]
        except SheetBindError as e:
            err = MappingError(sheet_name, cell_label(m.column_index, row_index), b.qualified_name, e)
            err.__cause__ = e
            return RowResult(row=row_index, error=err)
        if not present:
            continue
        if b.allocate is not None:
            b.allocate(item)
        _assign(item, b.path, value)
    return RowResult(row=row_index, value=item)


def materialize_rows(
    record_type: type,
    mappings: Sequence[ColumnMapping],
    rows: Sequence[Sequence[Any]],
    *,
    sheet_name: str,
    datetime_formats: Sequence[str],
    scope: CancelScope | None = None,
) -> Iterator[tuple[int, RowResult[Any]]]:
    """Yield `(row_index, RowResult)` for each data row (header excluded).

    `rows` are the data rows only. Stops silently once `scope` is cancelled;
    the caller reads the reason from `scope.error()`.
    """
    for offset, row in enumerate(rows):
        if scope is not None and scope.cancelled:
            return
        row_index = offset + FIRST_DATA_ROW
        yield row_index, _materialize_row(
            record_type,
            mappings,
            row,
            row_index,
            sheet_name=sheet_name,
            datetime_formats=datetime_formats,
        )
