from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Any

from ..errors import SchemaError
from .kinds import Kind

"""FieldBinding / ColumnMapping models.

A FieldBinding is one flattened leaf of a record type, derived once from the
type (see services.walker). A ColumnMapping pins a binding to the column index
it was matched to in one concrete header.
"""

__all__ = [
    "Converter",
    "Allocator",
    "FieldBinding",
    "ColumnMapping",
]

# (cell text, datetime formats) -> (value, present)
Converter = Callable[[str, Sequence[str]], tuple[Any, bool]]
# Instantiates every optional nested record along a leaf's path (idempotent)
Allocator = Callable[[Any], None]


@dataclass(frozen=True)
class FieldBinding:
    """One leaf destination field of a record type."""
    path: tuple[str, ...]  # attribute names from the root record to the leaf
    column: str  # header name this leaf binds to
    qualified_name: str  # e.g. "Workout.category.name", used in error messages
    kind: Kind | None  # None when the leaf type is unsupported
    optional: bool  # declared as Optional[...] / `T | None`
    convert: Converter | None = None  # empty-guarded converter
    allocate: Allocator | None = None  # set under optional nested records only
    fault: SchemaError | None = None  # deferred unsupported-type fault

    @property
    def attribute(self) -> str:
        return self.path[-1]


@dataclass(frozen=True)
class ColumnMapping:
    """A FieldBinding bound to a zero-based column index of one header."""
    binding: FieldBinding
    column_index: int

    @property
    def column(self) -> str:
        return self.binding.column
