"""Domain models for sheet -> record binding.

ParseOptions lives in `models.config_models`; it depends on the services
layer and is therefore not re-exported here.
"""

from .binding import ColumnMapping, FieldBinding
from .error_record import ErrorRecord
from .kinds import (
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
from .row_result import RowResult

__all__ = [
    # Kinds and width aliases
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
    # Binding models
    "FieldBinding",
    "ColumnMapping",
    # Results
    "RowResult",
    "ErrorRecord",
]
