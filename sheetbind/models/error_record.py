from __future__ import annotations

import json
from dataclasses import asdict, dataclass
from datetime import UTC, datetime

from ..errors import (
    ConfigurationError,
    ConvertError,
    FetchError,
    InvalidDatetimeFormatError,
    MappingError,
    ParseCancelledError,
    SchemaError,
    find_error,
)

"""ErrorRecord model for the JSON Lines error log.

One record per rejected row, or one with row=-1 for faults that aborted the
whole call (schema, fetch, configuration, cancellation).
"""

__all__ = [
    "ErrorRecord",
    "classify_error",
]


def classify_error(exc: BaseException) -> str:
    """UPPER_SNAKE error_type for a fault."""
    if find_error(exc, InvalidDatetimeFormatError) is not None:
        return "INVALID_DATETIME_FORMAT"
    if find_error(exc, ConvertError) is not None:
        return "CONVERSION_ERROR"
    if isinstance(exc, ParseCancelledError):
        return "CANCELLED"
    if isinstance(exc, FetchError):
        return "FETCH_ERROR"
    if isinstance(exc, SchemaError):
        return "SCHEMA_ERROR"
    if isinstance(exc, ConfigurationError):
        return "CONFIG_ERROR"
    return "UNEXPECTED_ERROR"


@dataclass(frozen=True)
class ErrorRecord:
    """Structured error record for JSON Lines logging.

    Attributes:
        timestamp: ISO8601 UTC timestamp with 'Z' suffix
        source: data source identifier (workbook path, ...)
        sheet: sheet name
        row: spreadsheet row number. -1 for call-level faults
        cell: cell label such as "B7", empty when unknown
        field: qualified record field such as "Workout.difficulty", empty when unknown
        error_type: classification in UPPER_SNAKE_CASE
        message: fault message
    """
    timestamp: str
    source: str
    sheet: str
    row: int
    cell: str
    field: str
    error_type: str
    message: str

    @staticmethod
    def create(
        source: str,
        sheet: str,
        row: int,
        error_type: str,
        message: str,
        *,
        cell: str = "",
        field: str = "",
    ) -> ErrorRecord:
        """Create a new ErrorRecord stamped with the current UTC time."""
        ts = datetime.now(UTC).isoformat().replace("+00:00", "Z")
        return ErrorRecord(
            timestamp=ts,
            source=source,
            sheet=sheet,
            row=row,
            cell=cell,
            field=field,
            error_type=error_type,
            message=message,
        )

    @staticmethod
    def from_exception(source: str, sheet: str, row: int, exc: BaseException) -> ErrorRecord:
        """Build a record from a fault; cell and field come from a MappingError."""
        located = find_error(exc, MappingError)
        message = str(located.error) if located is not None else str(exc)
        return ErrorRecord.create(
            source=source,
            sheet=sheet,
            row=row,
            error_type=classify_error(exc),
            message=message,
            cell=located.cell if located is not None else "",
            field=located.field if located is not None else "",
        )

    def to_json_line(self) -> str:
        """Serialize to one JSON line with exactly the dataclass keys."""
        return json.dumps(asdict(self), ensure_ascii=False)
