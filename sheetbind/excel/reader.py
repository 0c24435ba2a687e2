from __future__ import annotations

from pathlib import Path

import pandas as pd

"""Workbook / CSV readers and the file-backed fetchers built on them.

Every cell is read as text: no pandas NA conversion, blanks become "". Row 0
of the returned grid is the sheet's first row, which the parser treats as the
header.
"""

__all__ = [
    "SheetNotFoundError",
    "read_sheet_grid",
    "read_csv_grid",
    "ExcelFetcher",
    "CsvFetcher",
]


class SheetNotFoundError(Exception):
    """Raised when the requested sheet does not exist in the workbook."""


def _frame_to_grid(df: pd.DataFrame) -> list[list[str]]:
    df = df.fillna("")
    return [["" if v is None else str(v) for v in row] for row in df.itertuples(index=False, name=None)]


def read_sheet_grid(path: Path, sheet_name: str) -> list[list[str]]:
    """Read one workbook sheet as a 2-D text grid.

    Parameters
    ----------
    path: workbook path (.xlsx)
    sheet_name: sheet to read

    Raises
    ------
    FileNotFoundError: the workbook does not exist
    SheetNotFoundError: the workbook has no such sheet
    """
    if not path.exists():
        raise FileNotFoundError(f"workbook not found: {path}")
    with pd.ExcelFile(path) as xls:
        names = [str(n) for n in xls.sheet_names]
        if sheet_name not in names:
            raise SheetNotFoundError(f"sheet {sheet_name!r} not found in {path.name} (sheets: {names})")
        # header=None: the header row stays part of the grid
        df = xls.parse(sheet_name, header=None, dtype=str, keep_default_na=False, na_filter=False)
    return _frame_to_grid(df)


def read_csv_grid(path: Path, *, delimiter: str = ",", encoding: str = "utf-8") -> list[list[str]]:
    """Read a CSV file as a 2-D text grid."""
    if not path.exists():
        raise FileNotFoundError(f"csv file not found: {path}")
    df = pd.read_csv(
        path,
        header=None,
        dtype=str,
        keep_default_na=False,
        na_filter=False,
        sep=delimiter,
        encoding=encoding,
        skip_blank_lines=False,
    )
    return _frame_to_grid(df)


class ExcelFetcher:
    """Fetcher reading `source_id` as a workbook path."""

    def fetch(self, source_id: str, sheet_name: str) -> list[list[str]]:
        return read_sheet_grid(Path(source_id), sheet_name)


class CsvFetcher:
    """Fetcher reading `source_id` as a CSV path; a CSV file has one sheet, so the name is ignored."""

    def __init__(self, *, delimiter: str = ",", encoding: str = "utf-8") -> None:
        self.delimiter = delimiter
        self.encoding = encoding

    def fetch(self, source_id: str, sheet_name: str) -> list[list[str]]:
        return read_csv_grid(Path(source_id), delimiter=self.delimiter, encoding=self.encoding)
