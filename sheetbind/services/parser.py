from __future__ import annotations

import logging
from collections.abc import Iterator, Sequence
from functools import lru_cache
from typing import Any, Generic, TypeVar

import inflect

from ..errors import FetchError, NoFetcherError, NoSourceIdError, SheetBindError
from ..models.binding import ColumnMapping
from ..models.config_models import ParseOptions
from ..models.row_result import RowResult
from .cancel import CancelScope
from .grid import normalize_grid
from .materializer import materialize_rows
from .resolver import resolve_columns
from .walker import compile_bindings

"""Parse entrypoints: sheet grid -> typed records.

parse_all() does every step that can fail for the whole call (option checks,
fetch, binding compilation, column resolution) eagerly, then hands back a lazy
RowStream. parse_all_into_list() drains that stream and turns the first row
fault into the call's fault.
"""

__all__ = [
    "RowStream",
    "default_sheet_name",
    "parse_all",
    "parse_all_into_list",
]

logger = logging.getLogger(__name__)

T = TypeVar("T")


@lru_cache(maxsize=1)
def _inflect_engine() -> inflect.engine:
    return inflect.engine()


def default_sheet_name(record_type: type) -> str:
    """Pluralized record type name, e.g. `Workout` -> `Workouts`."""
    name = getattr(record_type, "__name__", type(record_type).__name__)
    return _inflect_engine().plural_noun(name)


class RowStream(Generic[T]):
    """Single-pass iterator of `(row_index, RowResult)` for one parse call.

    Attributes:
        sheet_name: resolved sheet name
        mappings: resolved column mappings, in application order
        row_count: number of data rows fetched (header excluded)
        error: cancellation fault once the stream stopped early, else None
    """

    def __init__(
        self,
        rows: Iterator[tuple[int, RowResult[T]]],
        *,
        sheet_name: str,
        mappings: Sequence[ColumnMapping],
        row_count: int,
        scope: CancelScope | None,
    ) -> None:
        self._rows = rows
        self._scope = scope
        self.sheet_name = sheet_name
        self.mappings = list(mappings)
        self.row_count = row_count
        self.error: SheetBindError | None = None
        self._produced = 0

    def __iter__(self) -> RowStream[T]:
        return self

    def __next__(self) -> tuple[int, RowResult[T]]:
        try:
            item = next(self._rows)
        except StopIteration:
            if self._scope is not None and self.error is None and self._produced < self.row_count:
                self.error = self._scope.error()
                if self.error is not None:
                    logger.info("sheet %r: stopped early: %s", self.sheet_name, self.error)
            raise
        self._produced += 1
        return item


def _build(record_type: type, options: ParseOptions, overrides: dict[str, Any]) -> ParseOptions:
    opts = options.merged(**overrides)
    if opts.fetcher is None:
        raise NoFetcherError()
    if not opts.source_id:
        raise NoSourceIdError()
    if not opts.sheet_name:
        opts = opts.merged(sheet_name=default_sheet_name(record_type))
    return opts


def _fetch(opts: ParseOptions) -> list[list[Any]]:
    assert opts.fetcher is not None and opts.sheet_name is not None
    try:
        grid = opts.fetcher.fetch(opts.source_id, opts.sheet_name)
    except SheetBindError:
        raise
    except Exception as e:
        raise FetchError(opts.source_id, opts.sheet_name, str(e)) from e
    return [list(row) for row in grid or []]


def parse_all(record_type: type[T], options: ParseOptions, **overrides: Any) -> RowStream[T]:
    """Set up parsing of one sheet into `record_type` records.

    Configuration, fetch and schema faults raise here, before any row is
    produced. Row faults are carried in the yielded RowResults.

    Args:
        record_type: dataclass describing one row
        options: shared options; never modified
        **overrides: per-call ParseOptions field overrides

    Raises:
        ConfigurationError: missing fetcher / source id, or the fetch failed.
        SchemaError: the record type cannot be mapped onto the sheet header.
        ParseCancelledError: the scope was already cancelled.
    """
    opts = _build(record_type, options, overrides)
    if opts.scope is not None and opts.scope.cancelled:
        raise opts.scope.error()  # type: ignore[misc]

    bindings = compile_bindings(record_type, opts.tag_name)
    sheet_name = opts.sheet_name or ""
    grid = _fetch(opts)
    header = grid[0] if grid else []
    logger.debug(
        "fetched sheet %r from %r: %d data rows", sheet_name, opts.source_id, max(len(grid) - 1, 0)
    )

    mappings = resolve_columns(
        bindings,
        header,
        record_name=record_type.__name__,
        allow_skip_fields=opts.allow_skip_fields,
        allow_skip_columns=opts.allow_skip_columns,
    )

    normalize_grid(grid)
    data_rows = grid[1:]
    rows = materialize_rows(
        record_type,
        mappings,
        data_rows,
        sheet_name=sheet_name,
        datetime_formats=opts.effective_datetime_formats,
        scope=opts.scope,
    )
    return RowStream(
        rows,
        sheet_name=sheet_name,
        mappings=mappings,
        row_count=len(data_rows),
        scope=opts.scope,
    )


def parse_all_into_list(record_type: type[T], options: ParseOptions, **overrides: Any) -> list[T]:
    """Parse every row eagerly into a list of records.

    The first row fault is raised as the call's fault and partial results are
    discarded; a cancelled run raises the scope's cancellation fault.
    """
    stream = parse_all(record_type, options, **overrides)
    items: list[T] = []
    for _, result in stream:
        if result.error is not None:
            raise result.error
        items.append(result.value)  # type: ignore[arg-type]
    if stream.error is not None:
        raise stream.error
    return items
