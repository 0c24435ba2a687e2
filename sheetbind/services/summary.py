from __future__ import annotations

from dataclasses import dataclass

"""SUMMARY line rendering for the CLI.

Format:
    SUMMARY sheet=<name> rows=<n> success=<n> failed=<n> elapsed_sec=<s>
"""

__all__ = [
    "LoadResult",
    "render_summary_line",
]


@dataclass(frozen=True)
class LoadResult:
    """Counters of one CLI load run."""
    sheet_name: str
    total_rows: int  # data rows fetched
    success_rows: int
    failed_rows: int
    elapsed_seconds: float
    cancelled: bool = False


def _format_seconds(value: float) -> str:
    if value == 0:
        return "0"
    if value == int(value):
        return str(int(value))
    if value < 0.01:
        # avoid scientific notation for very small numbers
        return f"{value:.6f}".rstrip("0").rstrip(".")
    return f"{value:.3f}".rstrip("0").rstrip(".")


def render_summary_line(result: LoadResult) -> str:
    """Render the SUMMARY line for a load run.

    Examples:
        >>> render_summary_line(LoadResult("Workouts", 3, 2, 1, 2.0))
        'SUMMARY sheet=Workouts rows=3 success=2 failed=1 elapsed_sec=2'
    """
    line = (
        f"SUMMARY sheet={result.sheet_name} "
        f"rows={result.total_rows} "
        f"success={result.success_rows} "
        f"failed={result.failed_rows} "
        f"elapsed_sec={_format_seconds(result.elapsed_seconds)}"
    )
    if result.cancelled:
        line += " cancelled=1"
    return line
