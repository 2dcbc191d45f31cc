"""Retry utilities with exponential backoff."""

import asyncio
import logging
import random
from dataclasses import dataclass
from typing import Awaitable, Callable, Optional, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass
class RetryConfig:
    """Configuration for retry behavior.

    ``max_retries`` counts retries after the first attempt, so the default
    makes three attempts in total.
    """

    max_retries: int = 2
    base_delay: float = 1.0  # seconds
    max_delay: float = 10.0  # seconds
    exponential_base: float = 2.0
    jitter: bool = True  # Add randomness to prevent thundering herd

    @classmethod
    def from_attempts(
        cls, attempts: int, base_delay: float = 1.0, max_delay: float = 10.0
    ) -> "RetryConfig":
        """Build a config from a total attempt count."""
        return cls(
            max_retries=max(0, attempts - 1),
            base_delay=base_delay,
            max_delay=max_delay,
        )

    @property
    def max_attempts(self) -> int:
        return self.max_retries + 1


class RetryExhausted(Exception):
    """All retry attempts exhausted."""

    def __init__(self, attempts: int, last_error: Optional[Exception] = None):
        self.attempts = attempts
        self.last_error = last_error
        super().__init__(f"Retry exhausted after {attempts} attempts")


def calculate_delay(
    attempt: int,
    base_delay: float = 1.0,
    max_delay: float = 10.0,
    exponential_base: float = 2.0,
    jitter: bool = True,
) -> float:
    """Calculate delay for a retry attempt with exponential backoff.

    Args:
        attempt: Current attempt number (0-indexed)
        base_delay: Initial delay in seconds
        max_delay: Maximum delay cap
        exponential_base: Base for exponential calculation
        jitter: Whether to add random jitter

    Returns:
        Delay in seconds
    """
    delay = base_delay * (exponential_base ** attempt)
    delay = min(delay, max_delay)

    if jitter:
        # Add +/- 25% jitter
        jitter_range = delay * 0.25
        delay = delay + random.uniform(-jitter_range, jitter_range)

    return max(0, delay)


async def retry_with_backoff(
    func: Callable[[], Awaitable[T]],
    config: Optional[RetryConfig] = None,
    on_retry: Optional[Callable[[int, Exception, float], None]] = None,
    retryable_exceptions: tuple = (Exception,),
) -> T:
    """Await a coroutine factory with exponential backoff retry.

    Args:
        func: Zero-argument callable returning a fresh awaitable per attempt
        config: Retry configuration
        on_retry: Callback called before each retry (attempt, error, delay)
        retryable_exceptions: Tuple of exceptions that should trigger retry

    Returns:
        Result of the first successful attempt

    Raises:
        RetryExhausted: If all retries fail
        Exception: If a non-retryable exception occurs
    """
    if config is None:
        config = RetryConfig()

    last_error: Optional[Exception] = None

    for attempt in range(config.max_retries + 1):
        try:
            return await func()
        except retryable_exceptions as e:
            last_error = e

            if attempt >= config.max_retries:
                break

            delay = calculate_delay(
                attempt,
                config.base_delay,
                config.max_delay,
                config.exponential_base,
                config.jitter,
            )

            if on_retry:
                on_retry(attempt, e, delay)
            else:
                logger.warning(
                    f"Attempt {attempt + 1} failed: {e}. "
                    f"Retrying in {delay:.1f}s..."
                )

            await asyncio.sleep(delay)

    raise RetryExhausted(config.max_retries + 1, last_error)
