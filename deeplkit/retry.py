"""Retrying a callable with exponential backoff."""

from __future__ import annotations

import math
import random
import time
from dataclasses import dataclass
from typing import Callable, Optional, Protocol, TypeVar

T = TypeVar("T")


class RetryCancelled(Exception):
    """Raised when the wait before a further attempt is cancelled."""


class _Cancellable(Protocol):
    def wait(self, timeout: Optional[float] = None) -> bool: ...


@dataclass(frozen=True)
class Backoff:
    """Exponential backoff with jitter; all durations are in seconds."""

    initial_delay: float = 1.0
    max_delay: float = 120.0
    factor: float = 2.0
    jitter: float = 0.1

    def delay(self, attempt: int) -> float:
        """Return how long to wait after the given (zero-based) failed attempt."""
        if attempt < 0:
            return self.initial_delay

        try:
            delay = math.pow(self.factor, attempt) * self.initial_delay
        except OverflowError:
            delay = self.max_delay
        delay = min(delay, self.max_delay)

        # A jitter of 0.1 scales the delay by a random value in [0.9, 1.1).
        spread = -1.0 + 2.0 * random.random()
        return delay * (1.0 + self.jitter * spread)


DEFAULT_BACKOFF = Backoff()


def retry(
    fn: Callable[[], T],
    *,
    max_attempts: int = 5,
    retry_if: Optional[Callable[[Exception], bool]] = None,
    backoff: Optional[Backoff] = DEFAULT_BACKOFF,
    cancel: Optional[_Cancellable] = None,
    sleep: Callable[[float], object] = time.sleep,
) -> Optional[T]:
    """Call ``fn`` until it succeeds, retrying failures that ``retry_if`` accepts.

    The last exception is raised once the attempts run out or a failure is not
    retriable. With ``cancel`` (an object such as ``threading.Event``) the wait
    between attempts ends early and raises :class:`RetryCancelled` when it is
    set; otherwise ``sleep`` is used. Zero attempts return ``None``.
    """
    if max_attempts < 0:
        raise ValueError("Maximum retries must be non-negative")

    for attempt in range(max_attempts):
        try:
            return fn()
        except Exception as exc:
            if retry_if is not None and not retry_if(exc):
                raise
            if attempt == max_attempts - 1:
                raise
            wait = backoff.delay(attempt) if backoff is not None else 0.0
            if cancel is not None:
                if cancel.wait(wait):
                    raise RetryCancelled("retry cancelled") from exc
            else:
                sleep(wait)
    return None