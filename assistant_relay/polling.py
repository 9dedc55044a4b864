"""
Retry-with-deadline polling.

``poll_until`` calls a fetch function until its result satisfies a predicate
or a ``Deadline`` runs out. Time comes from a ``Clock`` so tests can drive it
without sleeping.
"""

import logging
import time
from typing import Callable, Optional, TypeVar

from .errors import PollTimeout

logger = logging.getLogger(__name__)

T = TypeVar("T")


class SystemClock:
    """Monotonic wall clock."""

    def now(self) -> float:
        return time.monotonic()

    def sleep(self, seconds: float) -> None:
        time.sleep(seconds)


class Deadline:
    """A time budget measured from the moment it was created.

    Callers can ``shorten`` a deadline they hand to the pipeline; nothing can
    extend it.
    """

    def __init__(self, budget: float, clock: Optional[SystemClock] = None):
        self.clock = clock or SystemClock()
        self.budget = budget
        self.started = self.clock.now()

    def elapsed(self) -> float:
        return self.clock.now() - self.started

    def remaining(self) -> float:
        return max(0.0, self.budget - self.elapsed())

    def expired(self) -> bool:
        return self.elapsed() > self.budget

    def shorten(self, budget: float) -> None:
        self.budget = min(self.budget, budget)


def poll_until(
    fetch: Callable[[], T],
    done: Callable[[T], bool],
    interval: float,
    deadline: Deadline,
    clock: Optional[SystemClock] = None,
    description: str = "condition",
) -> T:
    """
    Poll ``fetch`` until ``done(result)`` holds, then return that result.

    Args:
        fetch: Called once per attempt; exceptions propagate unchanged
        done: Predicate on the fetched value
        interval: Seconds to sleep between attempts
        deadline: Budget checked after every unsuccessful attempt
        clock: Time source for sleeping (defaults to the deadline's clock)
        description: What is being waited for, used in the timeout message

    Raises:
        PollTimeout: the deadline elapsed before ``done`` held
    """
    clock = clock or deadline.clock
    attempts = 0
    while True:
        result = fetch()
        attempts += 1
        if done(result):
            logger.debug(f"{description} reached after {attempts} attempt(s)")
            return result

        if deadline.expired():
            raise PollTimeout(
                f"timeout waiting for {description} after {attempts} attempt(s)",
                attempts=attempts,
            )

        clock.sleep(interval)
