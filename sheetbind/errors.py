from __future__ import annotations

import json
from collections.abc import Sequence
from typing import TypeVar

"""Exception hierarchy for sheet -> record binding.

Three families share the `SheetBindError` root:
- configuration faults: raised before anything is fetched
- schema faults: raised once per call, before any row is produced
- row faults: carried inside a row's result, never abort the stream

Wrapping uses `raise ... from ...` (`__cause__`), so `find_error()` can dig the
original fault out of a `MappingError` without relying on message text.
"""

__all__ = [
    "SheetBindError",
    "ConfigurationError",
    "ConfigError",
    "NoFetcherError",
    "NoSourceIdError",
    "FetchError",
    "SchemaError",
    "UnsupportedTypeError",
    "FieldNotFoundInSheetError",
    "FieldNotFoundInRecordError",
    "UnmappedColumnsError",
    "NoMappingError",
    "ConvertError",
    "InvalidDatetimeFormatError",
    "MappingError",
    "ParseCancelledError",
    "DeadlineExceededError",
    "find_error",
]

E = TypeVar("E", bound=BaseException)


class SheetBindError(Exception):
    """Base class for every fault raised by sheetbind."""


## -- configuration faults

class ConfigurationError(SheetBindError):
    """Raised before fetching when the parse call is not usable."""


class ConfigError(ConfigurationError):
    """Options file missing, unreadable or failing schema validation."""


class NoFetcherError(ConfigurationError):
    def __init__(self) -> None:
        super().__init__("no data source fetcher registered")


class NoSourceIdError(ConfigurationError):
    def __init__(self) -> None:
        super().__init__("no data source id provided")


class FetchError(ConfigurationError):
    """The fetch collaborator failed; the original fault is the `__cause__`."""

    def __init__(self, source_id: str, sheet_name: str, detail: str) -> None:
        self.source_id = source_id
        self.sheet_name = sheet_name
        super().__init__(f"fetching sheet {sheet_name!r} from {source_id!r} failed: {detail}")


## -- schema faults

class SchemaError(SheetBindError):
    """Raised when record type and header cannot be reconciled."""


class UnsupportedTypeError(SchemaError):
    def __init__(self, field: str, type_name: str) -> None:
        self.field = field
        self.type_name = type_name
        super().__init__(f"unsupported type: field {field!r} of type {type_name!r} is unsupported")


class FieldNotFoundInSheetError(SchemaError):
    def __init__(self, column: str, field: str) -> None:
        self.column = column
        self.field = field
        super().__init__(f"field not found in sheet: {column!r} (field {field!r})")


class FieldNotFoundInRecordError(SchemaError):
    def __init__(self, column: str, column_index: int) -> None:
        self.column = column
        self.column_index = column_index
        super().__init__(f"field not found in record: {column!r}")


class UnmappedColumnsError(SchemaError):
    """Composite fault: one `FieldNotFoundInRecordError` per leftover header column."""

    def __init__(self, errors: Sequence[FieldNotFoundInRecordError]) -> None:
        self.errors = list(errors)
        super().__init__("\n".join(str(e) for e in self.errors))

    @property
    def columns(self) -> list[str]:
        return [e.column for e in self.errors]


class NoMappingError(SchemaError):
    def __init__(self, record: str) -> None:
        self.record = record
        super().__init__(f"no mapping found between record {record!r} and the sheet header")


## -- row faults

class ConvertError(SheetBindError):
    """A cell's text could not be converted into the destination kind."""

    def __init__(self, kind: object, value: str) -> None:
        self.kind = kind
        self.value = value
        kind_name = getattr(kind, "value", kind)
        super().__init__(
            f'conversion error, could not convert value "{value}" into type "{kind_name}"'
        )


class InvalidDatetimeFormatError(SheetBindError):
    def __init__(self, value: str, formats: Sequence[str]) -> None:
        self.value = value
        self.formats = list(formats)
        listed = ", ".join(json.dumps(f) for f in self.formats)
        super().__init__(
            f'invalid datetime format in value "{value}", recognized formats are: [{listed}]'
        )


class MappingError(SheetBindError):
    """Locates a row fault: sheet name, spreadsheet cell label and field path."""

    def __init__(self, sheet: str, cell: str, field: str, error: BaseException) -> None:
        self.sheet = sheet
        self.cell = cell
        self.field = field
        self.error = error
        super().__init__(sheet, cell, field, error)

    def __str__(self) -> str:
        return (
            f"{self.error}\n"
            f'\tsheet: "{self.sheet}"\n'
            f'\tcell: "{self.cell}"\n'
            f'\tfield: "{self.field}"'
        )


## -- cancellation

class ParseCancelledError(SheetBindError):
    def __init__(self, detail: str = "parsing cancelled") -> None:
        super().__init__(detail)


class DeadlineExceededError(ParseCancelledError):
    def __init__(self) -> None:
        super().__init__("parsing deadline exceeded")


def find_error(exc: BaseException | None, cls: type[E]) -> E | None:
    """Return the first `cls` instance in `exc`'s wrap chain, or None.

    Follows `MappingError.error`, `__cause__` and the members of an
    `UnmappedColumnsError`.
    """
    seen: set[int] = set()
    stack: list[BaseException] = [exc] if exc is not None else []
    while stack:
        cur = stack.pop(0)
        if id(cur) in seen:
            continue
        seen.add(id(cur))
        if isinstance(cur, cls):
            return cur
        if isinstance(cur, UnmappedColumnsError):
            stack.extend(cur.errors)
        if isinstance(cur, MappingError):
            stack.append(cur.error)
        if cur.__cause__ is not None:
            stack.append(cur.__cause__)
    return None
