from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeVar

"""RowResult model: the outcome of materializing one data row.

Exactly one of `value` / `error` is set. `row` is the spreadsheet row number
shown to users (the header is row 1, so the first data row is row 2).
"""

__all__ = [
    "RowResult",
]

T = TypeVar("T")


@dataclass(frozen=True)
class RowResult(Generic[T]):
    row: int  # spreadsheet row number (2 = first data row)
    value: T | None = None  # populated record on success
    error: Exception | None = None  # MappingError on a cell fault

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> T:
        """Return the record, raising the row's fault if there is one."""
        if self.error is not None:
            raise self.error
        return self.value  # type: ignore[return-value]
