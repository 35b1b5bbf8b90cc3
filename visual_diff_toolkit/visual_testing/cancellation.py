"""
Cancellation utilities for comparison runs

A comparison checks its token at every tile boundary. Cancelling (or
passing the deadline) makes the run raise ComparisonCancelledError; no
partial result is ever returned.
"""

import logging
import threading
import time

from visual_diff_toolkit.core.exceptions import ComparisonCancelledError

logger = logging.getLogger(__name__)


class CancellationToken:
    """
    Cooperative cancellation signal with an optional deadline

    Safe to cancel from any thread.

    Example:
        token = CancellationToken.with_timeout(2.0)
        engine.compare(baseline, candidate, cancel_token=token)
    """

    def __init__(self, deadline: float | None = None):
        """
        Args:
            deadline: time.monotonic() value after which the token counts as cancelled
        """
        self._event = threading.Event()
        self._reason = ""
        self.deadline = deadline

    @classmethod
    def with_timeout(cls, seconds: float) -> "CancellationToken":
        return cls(deadline=time.monotonic() + seconds)

    def cancel(self, reason: str = "Comparison cancelled") -> None:
        self._reason = reason
        self._event.set()

    @property
    def expired(self) -> bool:
        return self.deadline is not None and time.monotonic() >= self.deadline

    @property
    def cancelled(self) -> bool:
        return self._event.is_set() or self.expired

    def raise_if_cancelled(self, completed_tiles: int = 0) -> None:
        """
        Raises:
            ComparisonCancelledError: If cancelled or past the deadline
        """
        if self._event.is_set():
            logger.info(f"{self._reason} after {completed_tiles} tile(s)")
            raise ComparisonCancelledError(self._reason, completed_tiles=completed_tiles)
        if self.expired:
            logger.info(f"Comparison deadline passed after {completed_tiles} tile(s)")
            raise ComparisonCancelledError(
                "Comparison deadline exceeded", completed_tiles=completed_tiles
            )
