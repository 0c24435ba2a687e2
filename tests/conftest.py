# Shared pytest fixtures
from __future__ import annotations

import tempfile
from pathlib import Path

import pandas as pd
import pytest

from sheetbind.logging.init import reset_logging


@pytest.fixture()
def temp_workdir(monkeypatch) -> Path:
    with tempfile.TemporaryDirectory() as d:
        p = Path(d)
        (p / "config").mkdir()
        (p / "data").mkdir()
        (p / "logs").mkdir()
        monkeypatch.chdir(p)
        yield p


@pytest.fixture(autouse=True)
def _clean_logging():
    # setup_logging() keeps module state; start every test from scratch
    reset_logging()
    yield
    reset_logging()


@pytest.fixture()
def sample_options_yaml() -> str:
    return """source: ./data/workouts.xlsx
format: xlsx
sheet: Workouts
datetime_formats: ["%d.%m.%Y"]
allow_skip_fields: false
allow_skip_columns: false
"""


@pytest.fixture()
def write_options(temp_workdir: Path, sample_options_yaml: str) -> Path:
    cfg = temp_workdir / "config" / "load.yml"
    cfg.write_text(sample_options_yaml, encoding="utf-8")
    return cfg


@pytest.fixture()
def workout_rows() -> list[list[str]]:
    return [
        ["name", "difficulty", "date", "category"],
        ["Squat", "3", "01.02.2024", "legs"],
        ["Bench", "x", "02.02.2024", "chest"],
        ["Plank", "1", "", ""],
    ]


@pytest.fixture()
def make_workbook(temp_workdir: Path):
    """Build an .xlsx under data/ from `{sheet_name: rows}`; row 0 is the header."""
    def _make(sheets: dict[str, list[list[str]]], name: str = "workouts.xlsx") -> Path:
        path = temp_workdir / "data" / name
        with pd.ExcelWriter(path, engine="openpyxl") as writer:
            for sheet_name, rows in sheets.items():
                pd.DataFrame(rows).to_excel(writer, sheet_name=sheet_name, header=False, index=False)
        return path
    return _make


@pytest.fixture()
def workbook(make_workbook, workout_rows) -> Path:
    return make_workbook({"Workouts": workout_rows})
