"""
Bounded retry policy.
"""

import time
from dataclasses import dataclass
from typing import Callable, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class RetryPolicy:
    """Run an action up to max_attempts times, then hand back a fallback.

    Args:
        max_attempts: Total attempts, including the first one
        delay: Seconds to sleep between attempts (0 retries immediately)
        retry_on: Exception types that count as a failed attempt
    """

    max_attempts: int = 5
    delay: float = 0.0
    retry_on: tuple[type[Exception], ...] = (Exception,)

    def __post_init__(self):
        if self.max_attempts < 1:
            raise ValueError(f"max_attempts must be >= 1, got {self.max_attempts}")

    def call(
        self,
        action: Callable[[int], T],
        fallback: T,
        on_error: Callable[[int, Exception], None] | None = None,
        on_exhausted: Callable[[], None] | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> T:
        """
        Call action(attempt) until it returns without raising.

        Args:
            action: Receives the 1-based attempt number
            fallback: Returned once every attempt has failed
            on_error: Called with (attempt, exception) after each failure
            on_exhausted: Called once before fallback is returned

        Returns:
            The action's result, or fallback.
        """
        for attempt in range(1, self.max_attempts + 1):
            try:
                return action(attempt)
            except self.retry_on as e:
                if on_error:
                    on_error(attempt, e)
                if self.delay and attempt < self.max_attempts:
                    sleep(self.delay)

        if on_exhausted:
            on_exhausted()
        return fallback
