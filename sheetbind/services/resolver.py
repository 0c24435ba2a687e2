from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any

from ..errors import (
    FieldNotFoundInRecordError,
    FieldNotFoundInSheetError,
    NoMappingError,
    UnmappedColumnsError,
)
from ..models.binding import ColumnMapping, FieldBinding

"""Column resolver: matches compiled FieldBindings against one header row.

Rules:
- header names are matched verbatim (case sensitive, untrimmed)
- the first empty header cell ends the header; later columns are ignored
- first match wins, and a consumed name cannot satisfy a second binding
- an empty mapping list is always a failure, whatever the skip policy
"""

__all__ = [
    "header_columns",
    "resolve_columns",
]

logger = logging.getLogger(__name__)


def header_columns(header: Sequence[Any]) -> dict[str, int]:
    """Header name -> column index, left to right, up to the first blank cell."""
    columns: dict[str, int] = {}
    for idx, cell in enumerate(header):
        name = "" if cell is None else str(cell)
        if name == "":
            break
        columns.setdefault(name, idx)
    return columns


def resolve_columns(
    bindings: Sequence[FieldBinding],
    header: Sequence[Any],
    *,
    record_name: str,
    allow_skip_fields: bool = False,
    allow_skip_columns: bool = False,
) -> list[ColumnMapping]:
    """Bind each FieldBinding to its header column.

    Raises:
        UnsupportedTypeError: a leaf with an unsupported type matched a column.
        FieldNotFoundInSheetError: a binding has no column and skipping fields is off.
        UnmappedColumnsError: header columns left over and skipping columns is off.
        NoMappingError: nothing could be mapped at all.
    """
    remaining = header_columns(header)
    mappings: list[ColumnMapping] = []
    skipped_fields: list[str] = []

    for b in bindings:
        idx = remaining.pop(b.column, None)
        if idx is not None:
            if b.fault is not None:
                raise b.fault
            mappings.append(ColumnMapping(binding=b, column_index=idx))
            continue
        if not allow_skip_fields:
            raise FieldNotFoundInSheetError(b.column, b.qualified_name)
        skipped_fields.append(b.qualified_name)

    if remaining and not allow_skip_columns:
        leftovers = sorted(remaining.items(), key=lambda kv: kv[1])
        raise UnmappedColumnsError([FieldNotFoundInRecordError(name, idx) for name, idx in leftovers])

    if skipped_fields:
        logger.warning("fields not found in sheet, left at default: %s", skipped_fields)
    if remaining:
        logger.warning("sheet columns without destination field ignored: %s", sorted(remaining))

    if not mappings:
        raise NoMappingError(record_name)

    logger.debug(
        "resolved %d mappings for %s: %s",
        len(mappings),
        record_name,
        {m.column: m.column_index for m in mappings},
    )
    return mappings
