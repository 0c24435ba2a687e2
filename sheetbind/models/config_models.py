from __future__ import annotations

from dataclasses import dataclass, field, replace

from ..services.cancel import CancelScope
from ..services.converters import DEFAULT_DATETIME_FORMATS
from ..services.fetch import Fetcher
from ..services.walker import DEFAULT_TAG

"""ParseOptions: the configuration surface of a parse call.

Options are immutable; per-call overrides go through `dataclasses.replace`
(see `ParseOptions.merged`), so a shared options object is never tainted by
the calls that use it.
"""

__all__ = [
    "ParseOptions",
]


@dataclass(frozen=True)
class ParseOptions:
    """Options for parse_all / parse_all_into_list."""
    source_id: str = ""  # data source identifier (workbook path, spreadsheet id, ...)
    fetcher: Fetcher | None = None  # grid retrieval collaborator
    sheet_name: str | None = None  # None -> pluralized record type name
    tag_name: str = DEFAULT_TAG  # dataclass field metadata key holding column names
    datetime_formats: tuple[str, ...] = ()  # caller formats, tried before the defaults
    allow_skip_fields: bool = False  # fields missing from the header stay at default
    allow_skip_columns: bool = False  # header columns without a field are ignored
    scope: CancelScope | None = field(default=None, compare=False)  # cancellation / deadline

    def merged(self, **overrides: object) -> ParseOptions:
        """Copy with per-call overrides applied."""
        if not overrides:
            return self
        if "datetime_formats" in overrides:
            overrides["datetime_formats"] = tuple(overrides["datetime_formats"])  # type: ignore[arg-type]
        return replace(self, **overrides)  # type: ignore[arg-type]

    def with_datetime_formats(self, *formats: str) -> ParseOptions:
        """Copy with `formats` appended after the already configured ones."""
        return replace(self, datetime_formats=self.datetime_formats + tuple(formats))

    @property
    def effective_datetime_formats(self) -> tuple[str, ...]:
        """Caller formats first, then the built-in defaults."""
        return self.datetime_formats + DEFAULT_DATETIME_FORMATS
