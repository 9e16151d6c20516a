"""
Retry policy for calls to rate-limited services.
"""

import asyncio
import random
from dataclasses import dataclass
from typing import Awaitable, Callable, Optional, TypeVar

from loguru import logger

T = TypeVar('T')


@dataclass(frozen=True)
class RetryPolicy:
    """How often and how long to wait before retrying a call.

    The wait before retry ``n`` (1-based) is ``n * base_delay`` seconds plus up
    to ``jitter`` seconds of random noise, so each attempt waits longer than
    the previous one.
    """
    max_attempts: int = 5
    base_delay: float = 20.0
    jitter: float = 5.0

    def __post_init__(self):
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        if self.base_delay < 0 or self.jitter < 0:
            raise ValueError("delays must be non-negative")

    def delay_for(self, retry_number: int) -> float:
        return retry_number * self.base_delay + random.uniform(0, self.jitter)


async def call_with_retry(func: Callable[[], Awaitable[T]],
                          policy: RetryPolicy,
                          is_retryable: Callable[[Exception], bool],
                          sleep: Optional[Callable[[float], Awaitable[None]]] = None) -> T:
    """
    Await ``func()`` until it succeeds or the policy gives up.

    Exceptions for which ``is_retryable`` is False propagate immediately; the
    last retryable exception propagates once ``max_attempts`` is reached.

    Args:
        func: Zero-argument coroutine factory, called once per attempt
        policy: Retry limits and backoff schedule
        is_retryable: Predicate deciding whether an exception is worth retrying
        sleep: Replacement for asyncio.sleep (tests)
    """
    sleep = sleep or asyncio.sleep
    attempt = 1

    while True:
        try:
            return await func()
        except Exception as e:
            if not is_retryable(e) or attempt >= policy.max_attempts:
                raise
            wait = policy.delay_for(attempt)
            logger.warning(f"⚠️ Rate limit hit, attempt {attempt}/{policy.max_attempts}, "
                           f"waiting {wait:.0f}s before retry")
            await sleep(wait)
            attempt += 1
