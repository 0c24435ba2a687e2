"""sheetbind: bind spreadsheet rows onto typed dataclass records.

Typical use::

    @dataclass
    class Workout:
        name: str
        level: Int8 = column("difficulty")

    opts = ParseOptions(source_id="workouts.xlsx", fetcher=ExcelFetcher())
    for row, result in parse_all(Workout, opts):
        ...
"""

from .errors import (
    ConfigError,
    ConfigurationError,
    ConvertError,
    DeadlineExceededError,
    FetchError,
    FieldNotFoundInRecordError,
    FieldNotFoundInSheetError,
    InvalidDatetimeFormatError,
    MappingError,
    NoFetcherError,
    NoMappingError,
    NoSourceIdError,
    ParseCancelledError,
    SchemaError,
    SheetBindError,
    UnmappedColumnsError,
    UnsupportedTypeError,
    find_error,
)
from .excel.reader import CsvFetcher, ExcelFetcher
from .models.config_models import ParseOptions
from .models.kinds import (
    Float32,
    Float64,
    Int8,
    Int16,
    Int32,
    Int64,
    Kind,
    Uint,
    Uint8,
    Uint16,
    Uint32,
    Uint64,
)
from .models.row_result import RowResult
from .services.cancel import CancelScope
from .services.fetch import Fetcher, StaticFetcher
from .services.grid import column_label, normalize_grid
from .services.parser import RowStream, default_sheet_name, parse_all, parse_all_into_list
from .services.walker import DEFAULT_TAG, column, compile_bindings

__all__ = [
    # Entry points
    "parse_all",
    "parse_all_into_list",
    "RowStream",
    "RowResult",
    "ParseOptions",
    "CancelScope",
    "default_sheet_name",
    # Record declaration
    "column",
    "compile_bindings",
    "DEFAULT_TAG",
    "Kind",
    "Int8",
    "Int16",
    "Int32",
    "Int64",
    "Uint",
    "Uint8",
    "Uint16",
    "Uint32",
    "Uint64",
    "Float32",
    "Float64",
    # Data sources
    "Fetcher",
    "StaticFetcher",
    "ExcelFetcher",
    "CsvFetcher",
    "normalize_grid",
    "column_label",
    # Errors
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
