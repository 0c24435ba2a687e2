from __future__ import annotations

import json
from pathlib import Path

from sheetbind.logging.error_log import ErrorLogBuffer
from sheetbind.models.error_record import ErrorRecord


def test_error_log_buffer_flush(temp_workdir: Path):
    buf = ErrorLogBuffer()
    buf.append(ErrorRecord.create("book.xlsx", "S", 2, "CONVERSION_ERROR", "bad int", cell="A2", field="T.a"))
    buf.append(ErrorRecord.create("book.xlsx", "S", 3, "INVALID_DATETIME_FORMAT", "bad date"))
    path = buf.flush()
    assert path is not None and path.exists()
    assert path.parent.resolve() == (temp_workdir / "logs").resolve()
    assert path.name.startswith("errors-") and path.suffix == ".log"

    lines = path.read_text(encoding="utf-8").strip().splitlines()
    assert len(lines) == 2
    assert json.loads(lines[0])["cell"] == "A2"
    assert len(buf) == 0


def test_error_log_buffer_multiple_flushes(temp_workdir: Path):
    buf = ErrorLogBuffer()
    buf.append(ErrorRecord.create("b", "S", 2, "CONVERSION_ERROR", "one"))
    path = buf.flush()
    size1 = path.stat().st_size
    buf.append(ErrorRecord.create("b", "S", 3, "CONVERSION_ERROR", "two"))
    path2 = buf.flush()
    assert path == path2
    assert path2.stat().st_size > size1


def test_empty_flush_writes_nothing(tmp_path: Path):
    buf = ErrorLogBuffer(logs_dir=tmp_path / "logs")
    assert buf.flush() is None
    assert not (tmp_path / "logs").exists()
