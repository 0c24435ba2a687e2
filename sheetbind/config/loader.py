from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import jsonschema
import yaml
from jsonschema.exceptions import ValidationError

from ..errors import ConfigError
from ..excel.reader import CsvFetcher, ExcelFetcher
from ..models.config_models import ParseOptions
from ..services.cancel import CancelScope
from ..services.fetch import Fetcher
from ..services.walker import DEFAULT_TAG

"""Options file loader.

Responsibilities:
- Load a YAML options file (e.g. config/load.yml)
- Validate it against the bundled JSON schema (options_schema.json)
- Apply defaults and build ParseOptions, including the file fetcher
"""

__all__ = [
    "SCHEMA_PATH",
    "load_options",
    "options_from_mapping",
]

SCHEMA_PATH = Path(__file__).with_name("options_schema.json")


def _validate_options_schema(data: dict[str, Any]) -> None:
    """Validate options data against the JSON schema.

    Raises:
        ConfigError: If any of the following occurs:
            - The schema file does not exist.
            - The schema file is not valid JSON.
            - The options fail schema validation (missing `source`, wrong
              types, unknown keys, ...).
    """
    if not SCHEMA_PATH.exists():
        raise ConfigError(f"options schema not found: {SCHEMA_PATH}")

    try:
        schema = json.loads(SCHEMA_PATH.read_text(encoding="utf-8"))
        jsonschema.validate(data, schema)
    except json.JSONDecodeError as e:
        raise ConfigError(f"invalid schema file: {e}") from e
    except ValidationError as e:
        raise ConfigError(f"options validation failed: {e.message}") from e


def _fetcher_for(data: dict[str, Any]) -> Fetcher:
    if data.get("format", "xlsx") == "csv":
        csv_opts = data.get("csv", {})
        return CsvFetcher(
            delimiter=csv_opts.get("delimiter", ","),
            encoding=csv_opts.get("encoding", "utf-8"),
        )
    return ExcelFetcher()


def options_from_mapping(data: dict[str, Any], *, fetcher: Fetcher | None = None) -> ParseOptions:
    """Validate an already-parsed options mapping and build ParseOptions."""
    _validate_options_schema(data)
    timeout = data.get("timeout_seconds")
    return ParseOptions(
        source_id=data["source"],
        fetcher=fetcher if fetcher is not None else _fetcher_for(data),
        sheet_name=data.get("sheet"),
        tag_name=data.get("tag_name", DEFAULT_TAG),
        datetime_formats=tuple(data.get("datetime_formats", ())),
        allow_skip_fields=data.get("allow_skip_fields", False),
        allow_skip_columns=data.get("allow_skip_columns", False),
        scope=CancelScope(timeout=timeout) if timeout is not None else None,
    )


def load_options(path: Path, *, fetcher: Fetcher | None = None) -> ParseOptions:
    if not path.exists():
        raise ConfigError(f"options file not found: {path}")
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid yaml: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"options file must contain a mapping, got {type(data).__name__}")
    return options_from_mapping(data, fetcher=fetcher)
