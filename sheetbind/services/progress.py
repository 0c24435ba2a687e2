from __future__ import annotations

import sys
from typing import Any

from tqdm import tqdm
from tqdm.std import tqdm as TqdmType

"""Row progress display with tqdm (TTY only).

In non-TTY environments (CI, redirected output) no bar is created, so logs
and JSON Lines output are not interleaved with ANSI control sequences.
"""

__all__ = [
    "ProgressTracker",
    "is_tty_enabled",
]


def is_tty_enabled() -> bool:
    return sys.stdout.isatty()


class ProgressTracker:
    """Progress bar over the data rows of one sheet."""

    def __init__(self, total_rows: int, *, description: str = "Parsing rows") -> None:
        self.total_rows = total_rows
        self.description = description
        self.ok_rows = 0
        self.failed_rows = 0

        self.enabled = is_tty_enabled()
        self.pbar: TqdmType[Any] | None
        if self.enabled:
            self.pbar = tqdm(
                total=total_rows,
                desc=description,
                unit="row",
                leave=True,
                ncols=80,
                ascii=True,
                file=sys.stderr,
            )
        else:
            self.pbar = None

    def advance(self, success: bool = True) -> None:
        """Count one processed row."""
        if success:
            self.ok_rows += 1
        else:
            self.failed_rows += 1
        if self.enabled and self.pbar is not None:
            self.pbar.update(1)
            if not success:
                self.pbar.set_postfix(failed=self.failed_rows)

    def close(self) -> None:
        if self.enabled and self.pbar is not None:
            self.pbar.close()
            self.pbar = None

    def __enter__(self) -> ProgressTracker:
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()
