from __future__ import annotations

from sheetbind.services.summary import LoadResult, render_summary_line


def test_render_summary_line():
    line = render_summary_line(LoadResult("Workouts", 3, 2, 1, 2.0))
    assert line == "SUMMARY sheet=Workouts rows=3 success=2 failed=1 elapsed_sec=2"


def test_render_summary_line_fractional_seconds():
    assert render_summary_line(LoadResult("S", 0, 0, 0, 1.23456)).endswith("elapsed_sec=1.235")
    assert render_summary_line(LoadResult("S", 0, 0, 0, 0.0012)).endswith("elapsed_sec=0.0012")
    assert render_summary_line(LoadResult("S", 0, 0, 0, 0)).endswith("elapsed_sec=0")


def test_render_summary_line_cancelled():
    line = render_summary_line(LoadResult("S", 5, 1, 0, 1.0, cancelled=True))
    assert line.endswith("elapsed_sec=1 cancelled=1")
