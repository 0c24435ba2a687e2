from __future__ import annotations

import argparse
import dataclasses
import importlib
import json
import os
import sys
import time
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path
from typing import IO, Any

from dotenv import load_dotenv

from sheetbind.config.loader import load_options
from sheetbind.errors import ConfigError, SheetBindError
from sheetbind.logging.error_log import ErrorLogBuffer
from sheetbind.logging.init import log_summary, setup_logging
from sheetbind.models.config_models import ParseOptions
from sheetbind.models.error_record import ErrorRecord
from sheetbind.services.parser import default_sheet_name, parse_all
from sheetbind.services.progress import ProgressTracker
from sheetbind.services.summary import LoadResult, render_summary_line

"""CLI entrypoint.

Flow:
- Load .env (overriding), then the YAML options file
- Import the record dataclass given as `module:Class`
- Parse the sheet and write each record as one JSON line
- Buffer row faults into logs/errors-*.log, print the SUMMARY line

Exit codes: 0 every row parsed, 2 some rows failed, 1 fatal.
"""

EXIT_SUCCESS_ALL = 0
EXIT_PARTIAL_FAILURE = 2
EXIT_FATAL = 1

ENV_SOURCE = "SHEETBIND_SOURCE"
ENV_SHEET = "SHEETBIND_SHEET"

INSPECT_ROWS = 3


def _load_env_file(path: Path, override: bool = True) -> None:
    """Load .env using python-dotenv; its values win over the process environment."""
    if path.exists():
        load_dotenv(dotenv_path=path, override=override)


def _parse_args(argv: list[str]) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Spreadsheet -> typed records (JSON Lines)")
    p.add_argument("--config", default="config/load.yml", help="YAML options file")
    p.add_argument("--record", required=True, help="Record dataclass as module:Class")
    p.add_argument("--output", help="Write records here instead of stdout")
    p.add_argument("--debug", action="store_true", help="Enable debug logging")
    p.add_argument("--inspect-data", action="store_true", help="Print sheet header & first rows then exit")
    return p.parse_args(argv)


def _import_record(target: str) -> type:
    """Resolve `package.module:ClassName` to a dataclass type."""
    module_name, sep, attr = target.partition(":")
    if not sep or not module_name or not attr:
        raise ValueError(f"expected module:Class, got {target!r}")
    module = importlib.import_module(module_name)
    obj: Any = module
    for part in attr.split("."):
        obj = getattr(obj, part)
    if not (isinstance(obj, type) and dataclasses.is_dataclass(obj)):
        raise ValueError(f"{target!r} is not a dataclass type")
    return obj


def _apply_env(opts: ParseOptions) -> ParseOptions:
    overrides: dict[str, Any] = {}
    if os.getenv(ENV_SOURCE):
        overrides["source_id"] = os.environ[ENV_SOURCE]
    if os.getenv(ENV_SHEET):
        overrides["sheet_name"] = os.environ[ENV_SHEET]
    return opts.merged(**overrides)


def _json_default(value: Any) -> Any:
    if isinstance(value, datetime):
        return value.isoformat()
    raise TypeError(f"not JSON serializable: {type(value).__name__}")


def _record_json(record: Any) -> str:
    return json.dumps(dataclasses.asdict(record), default=_json_default, ensure_ascii=False)


@contextmanager
def _open_output(path: str | None) -> Iterator[IO[str]]:
    if path is None:
        yield sys.stdout
        return
    out = Path(path)
    out.parent.mkdir(parents=True, exist_ok=True)
    with out.open("w", encoding="utf-8") as f:
        yield f


def _inspect_data(opts: ParseOptions, record_type: type) -> int:
    sheet = opts.sheet_name or default_sheet_name(record_type)
    assert opts.fetcher is not None
    try:
        grid = opts.fetcher.fetch(opts.source_id, sheet)
    except Exception as e:
        print(f"inspect: read_error: {e}")
        return EXIT_FATAL
    header = grid[0] if grid else []
    print(f"SHEET: {sheet} source={opts.source_id} rows={max(len(grid) - 1, 0)}")
    print(f"  header={list(header)}")
    for offset, row in enumerate(grid[1:1 + INSPECT_ROWS]):
        print(f"  row {offset + 2}: {list(row)}")
    return EXIT_SUCCESS_ALL


def main(argv: list[str] | None = None) -> int:
    # None only: an explicit [] must not fall back to sys.argv (pytest args)
    if argv is None:
        argv = sys.argv[1:]
    args = _parse_args(argv)
    # records on stdout -> log lines on stderr
    logger = setup_logging(stream=sys.stderr if args.output is None else sys.stdout)
    _load_env_file(Path(".env"), override=True)

    if args.debug:
        for h in logger.handlers:
            h.setLevel("DEBUG")
        logger.setLevel("DEBUG")
        logger.debug("debug mode enabled")

    try:
        opts = _apply_env(load_options(Path(args.config)))
    except ConfigError as e:
        logger.error(f"config: {e}")
        return EXIT_FATAL

    try:
        record_type = _import_record(args.record)
    except (ImportError, AttributeError, ValueError) as e:
        logger.error(f"record: {e}")
        return EXIT_FATAL

    if args.inspect_data:
        return _inspect_data(opts, record_type)

    logger.info(f"Parsing {record_type.__name__} records from: {opts.source_id}")
    error_log = ErrorLogBuffer()
    started = time.perf_counter()

    try:
        stream = parse_all(record_type, opts)
    except SheetBindError as e:
        sheet = opts.sheet_name or default_sheet_name(record_type)
        error_log.append(ErrorRecord.from_exception(opts.source_id, sheet, -1, e))
        error_log.flush()
        logger.error(f"parse: {e}")
        return EXIT_FATAL

    success = failed = 0
    with _open_output(args.output) as out, ProgressTracker(
        stream.row_count, description=f"Parsing {stream.sheet_name}"
    ) as progress:
        for row_index, result in stream:
            if result.error is None:
                out.write(_record_json(result.value) + "\n")
                success += 1
            else:
                rec = ErrorRecord.from_exception(opts.source_id, stream.sheet_name, row_index, result.error)
                error_log.append(rec)
                logger.warning(f"row={row_index} cell={rec.cell} field={rec.field} {rec.message}")
                failed += 1
            progress.advance(success=result.ok)

    if stream.error is not None:
        error_log.append(ErrorRecord.from_exception(opts.source_id, stream.sheet_name, -1, stream.error))
        logger.error(f"parse: {stream.error}")

    log_path = error_log.flush()
    if log_path is not None:
        logger.info(f"error log written: {log_path}")

    summary_line = render_summary_line(LoadResult(
        sheet_name=stream.sheet_name,
        total_rows=stream.row_count,
        success_rows=success,
        failed_rows=failed,
        elapsed_seconds=time.perf_counter() - started,
        cancelled=stream.error is not None,
    ))
    # log_summary adds the "SUMMARY " label itself
    log_summary(summary_line[len("SUMMARY "):])

    if stream.error is not None:
        return EXIT_FATAL
    if failed > 0:
        return EXIT_PARTIAL_FAILURE
    return EXIT_SUCCESS_ALL


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
