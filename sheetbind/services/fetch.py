from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any, Protocol, runtime_checkable

"""Data source fetch collaborator.

A fetcher returns the raw 2-D text grid of one sheet; row 0 is the header.
File-backed fetchers live in sheetbind.excel.reader.
"""

__all__ = [
    "Fetcher",
    "StaticFetcher",
]


@runtime_checkable
class Fetcher(Protocol):
    """Protocol for grid retrieval: `(source_id, sheet_name) -> rows of text cells`."""
    def fetch(self, source_id: str, sheet_name: str) -> list[list[Any]]: ...


class StaticFetcher:
    """In-memory fetcher serving fixed grids keyed by sheet name.

    Grids are copied on every fetch, so normalizing one parse call's grid never
    leaks into the next.
    """

    def __init__(self, sheets: Mapping[str, Sequence[Sequence[Any]]]) -> None:
        self.sheets = dict(sheets)
        self.calls: list[tuple[str, str]] = []

    def fetch(self, source_id: str, sheet_name: str) -> list[list[Any]]:
        self.calls.append((source_id, sheet_name))
        try:
            grid = self.sheets[sheet_name]
        except KeyError:
            raise KeyError(f"sheet not found: {sheet_name!r}") from None
        return [list(row) for row in grid]
