# resilient_locator/utils/timing.py
from __future__ import annotations

import time
from dataclasses import dataclass
from functools import wraps
from typing import Callable, Optional, TypeVar, ParamSpec

from resilient_locator.utils.config import Settings, get_settings
from resilient_locator.utils.logger import get_logger

P = ParamSpec("P")
T = TypeVar("T")


# ---------------- Monotonic time helpers ----------------

def now_ms() -> int:
    """Monotonic time in milliseconds."""
    return time.monotonic_ns() // 1_000_000


def sleep_ms(ms: int) -> None:
    """Sleep for `ms` milliseconds (blocking)."""
    if ms <= 0:
        return
    time.sleep(ms / 1000.0)


# ---------------- Stopwatch ----------------

@dataclass
class Stopwatch:
    """Simple stopwatch usable as a context manager."""
    start_ms: Optional[int] = None

    def start(self) -> "Stopwatch":
        self.start_ms = now_ms()
        return self

    def elapsed_ms(self) -> int:
        if self.start_ms is None:
            return 0
        return max(0, now_ms() - self.start_ms)

    def __enter__(self) -> "Stopwatch":
        return self.start()

    def __exit__(self, exc_type, exc, tb) -> None:
        return None


# ---------------- wait_for (polling) ----------------

class WaitTimeout(TimeoutError):
    """Raised by `wait_for` / `WaitPolicy.until` when the deadline passes."""

    def __init__(self, timeout_ms: int, description: Optional[str] = None, ticks: int = 0) -> None:
        desc = f" ({description})" if description else ""
        super().__init__(f"wait_for timed out after {timeout_ms} ms{desc}")
        self.timeout_ms = timeout_ms
        self.description = description
        self.ticks = ticks


def wait_for(
    predicate: Callable[[], T],
    timeout_ms: int,
    interval_ms: int = 100,
    description: Optional[str] = None,
) -> T:
    """
    Poll `predicate()` until it returns a truthy value, or until `timeout_ms`
    elapses. Returns the predicate's return value.

    The predicate always runs at least once, and once more at the deadline
    when the last sleep overshoots it.

    Raises:
        WaitTimeout on timeout.
    """
    log = get_logger(__name__)
    deadline = now_ms() + max(0, timeout_ms)
    ticks = 0

    while True:
        ticks += 1
        val = predicate()
        if val:
            return val
        remaining = deadline - now_ms()
        if remaining <= 0:
            raise WaitTimeout(timeout_ms, description, ticks)
        sleep_ms(min(max(1, interval_ms), remaining))

        if interval_ms >= 500 and ticks % 4 == 0:
            log.debug(f"Waiting... {max(0, deadline - now_ms())} ms left{(' - ' + description) if description else ''}")


@dataclass(frozen=True)
class WaitPolicy:
    """
    Timeout plus poll interval shared by every cascade and readiness check.

    `until()` blocks the calling thread; there is no cancellation besides
    the deadline.
    """
    timeout_ms: int = 15000
    interval_ms: int = 500

    def __post_init__(self) -> None:
        if self.timeout_ms < 0:
            raise ValueError("timeout_ms must be >= 0")
        if self.interval_ms <= 0:
            raise ValueError("interval_ms must be > 0")

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "WaitPolicy":
        settings = settings or get_settings()
        return cls(timeout_ms=settings.LOCATOR_TIMEOUT_MS, interval_ms=settings.POLL_INTERVAL_MS)

    def until(self, predicate: Callable[[], T], description: Optional[str] = None) -> T:
        return wait_for(predicate, self.timeout_ms, self.interval_ms, description)


# ---------------- measure decorator ----------------

def measure(label: str = "", level: str = "DEBUG") -> Callable[[Callable[P, T]], Callable[P, T]]:
    """
    Decorator to log the execution time of a function.
    Example:
        @measure("fill")
        def _do_fill(...): ...
    """
    level = level.upper()
    log = get_logger(__name__)
    log_fn = getattr(log, level.lower(), log.info)

    def decorator(func: Callable[P, T]) -> Callable[P, T]:
        @wraps(func)
        def wrapper(*args: P.args, **kwargs: P.kwargs) -> T:
            with Stopwatch() as sw:
                try:
                    return func(*args, **kwargs)
                finally:
                    ms = sw.elapsed_ms()
                    human = f"{ms} ms" if ms < 1000 else f"{ms/1000:.3f} s"
                    log_fn(f"{label or func.__name__} took {human}")
        return wrapper
    return decorator
