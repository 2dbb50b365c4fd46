import time
from collections.abc import Callable

from app.extraction.exceptions import DeadlineExceededError


class Deadline:
    """Wall-clock budget for one extraction request, shared by every stage."""

    def __init__(self, seconds: float, clock: Callable[[], float] = time.monotonic) -> None:
        self._clock = clock
        self._seconds = seconds
        self._expires_at = clock() + seconds

    @property
    def seconds(self) -> float:
        return self._seconds

    @property
    def remaining(self) -> float:
        return max(0.0, self._expires_at - self._clock())

    @property
    def expired(self) -> bool:
        return self.remaining <= 0.0

    def check(self, where: str) -> None:
        """Raise DeadlineExceededError if the budget is spent."""
        if self.expired:
            raise DeadlineExceededError(
                f"Extraction deadline of {self._seconds:g}s exceeded ({where})"
            )

    def bound(self, timeout: float) -> float:
        """Clamp an I/O timeout so it cannot outlive the deadline."""
        return min(timeout, self.remaining)
