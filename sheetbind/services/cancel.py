from __future__ import annotations

import threading
import time

from ..errors import DeadlineExceededError, ParseCancelledError

"""Cooperative cancellation for row streams.

A CancelScope is checked by the materializer before every row. It can be
cancelled from any thread and may carry a deadline; the error it reports
tells cancellation and an expired deadline apart.
"""

__all__ = [
    "CancelScope",
]


class CancelScope:
    """Cancellation signal with an optional deadline.

    Args:
        timeout: seconds from now after which the scope counts as cancelled
    """

    def __init__(self, timeout: float | None = None) -> None:
        self._event = threading.Event()
        self._deadline = time.monotonic() + timeout if timeout is not None else None

    def cancel(self) -> None:
        self._event.set()

    @property
    def deadline_exceeded(self) -> bool:
        return self._deadline is not None and time.monotonic() >= self._deadline

    @property
    def cancelled(self) -> bool:
        return self._event.is_set() or self.deadline_exceeded

    def error(self) -> ParseCancelledError | None:
        """None while active; otherwise the fault describing why it stopped."""
        if self._event.is_set():
            return ParseCancelledError()
        if self.deadline_exceeded:
            return DeadlineExceededError()
        return None

    def __repr__(self) -> str:  # pragma: no cover (trivial)
        return f"CancelScope(cancelled={self.cancelled}, deadline={self._deadline})"
