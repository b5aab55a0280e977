"""Per-probe deadlines and cancellation."""

from __future__ import annotations

import threading
import time
from typing import Optional

from http_prober.core.errors import DeadlineExceeded, ProbeCancelled


class CancelToken:
    """Thread-safe cancellation flag, optionally chained to a parent token."""

    def __init__(self, parent: Optional['CancelToken'] = None):
        self._event = threading.Event()
        self._parent = parent

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        if self._event.is_set():
            return True
        return self._parent is not None and self._parent.cancelled


class Deadline:
    """
    Context manager bounding a single probe.

    The clock starts on enter. On exit the deadline's own token is
    always cancelled, so nothing outlives the iteration that created it.
    """

    def __init__(self, timeout: float, parent: Optional[CancelToken] = None):
        if timeout <= 0:
            raise ValueError('timeout must be positive')
        self.timeout = timeout
        self.parent = parent
        self.token: Optional[CancelToken] = None
        self.started_at: Optional[float] = None
        self.expires_at: Optional[float] = None
        self._released = False

    def __enter__(self) -> 'Deadline':
        self.started_at = time.monotonic()
        self.expires_at = self.started_at + self.timeout
        self.token = CancelToken(self.parent)
        self._released = False
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.release()

    def release(self) -> None:
        if self.token is not None:
            self.token.cancel()
        self._released = True

    @property
    def released(self) -> bool:
        return self._released

    def remaining(self) -> float:
        if self.expires_at is None:
            raise RuntimeError('deadline has not been entered')
        return max(0.0, self.expires_at - time.monotonic())

    def elapsed(self) -> float:
        if self.started_at is None:
            return 0.0
        return time.monotonic() - self.started_at

    @property
    def expired(self) -> bool:
        return self.remaining() <= 0

    @property
    def cancelled(self) -> bool:
        """True once the parent is cancelled or this deadline has been released."""
        if self.token is not None:
            return self.token.cancelled
        return self.parent is not None and self.parent.cancelled

    def check(self) -> None:
        """Raise ProbeCancelled or DeadlineExceeded if the probe must stop."""
        if self.cancelled:
            raise ProbeCancelled('context canceled')
        if self.expired:
            raise DeadlineExceeded('context deadline exceeded')
