"""Bounded exponential-backoff retry for rate-limited generation attempts."""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from enum import Enum
from typing import TypeVar

from prodstack.core.errors import RateLimitError, RateLimitExhaustedError
from prodstack.core.logging import get_logger, log_with_context

logger = get_logger(__name__)

T = TypeVar("T")

MAX_RETRIES = 3
BASE_DELAY_MS = 1000


class RetryState(str, Enum):
    ATTEMPTING = "attempting"
    SUCCEEDED = "succeeded"
    FAILED_RETRIES_EXHAUSTED = "failed_retries_exhausted"
    FAILED_FATAL = "failed_fatal"


class RetryController:
    """
    Run an operation, retrying only on RateLimitError.

    Retry ``n`` (1-based) waits ``2**n * base_delay_ms`` before re-running,
    so the defaults wait 2s, 4s and 8s. Attempts are strictly sequential.
    Any other error ends the run immediately.

    Args:
        max_retries: Retries after the first attempt
        base_delay_ms: Backoff base in milliseconds
        sleep: Coroutine taking seconds; injectable for tests
    """

    def __init__(
        self,
        max_retries: int = MAX_RETRIES,
        base_delay_ms: int = BASE_DELAY_MS,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self.max_retries = max_retries
        self.base_delay_ms = base_delay_ms
        self._sleep = sleep
        self.state = RetryState.ATTEMPTING
        self.retry_count = 0
        self.delays_ms: list[int] = []

    def delay_ms(self, retry_number: int) -> int:
        return 2**retry_number * self.base_delay_ms

    async def attempt(
        self,
        operation: Callable[[], Awaitable[T]],
        on_retry: Callable[[int], None] | None = None,
    ) -> T:
        """
        Run ``operation`` until it succeeds, fails fatally, or retries run out.

        ``on_retry`` is called with the retry number after the backoff wait
        and before the operation runs again.

        Raises:
            RateLimitExhaustedError: Rate limited on every attempt
            Exception: Any non-rate-limit error from ``operation``, unchanged
        """
        self.state = RetryState.ATTEMPTING
        self.retry_count = 0
        self.delays_ms = []

        for attempt_number in range(1, self.max_retries + 2):
            try:
                result = await operation()
            except RateLimitError as e:
                if self.retry_count >= self.max_retries:
                    self.state = RetryState.FAILED_RETRIES_EXHAUSTED
                    log_with_context(
                        logger, logging.ERROR, "Rate limit retries exhausted", attempts=attempt_number
                    )
                    raise RateLimitExhaustedError(attempt_number) from e

                self.retry_count += 1
                delay = self.delay_ms(self.retry_count)
                self.delays_ms.append(delay)
                log_with_context(
                    logger,
                    logging.WARNING,
                    f"Rate limited, retrying in {delay}ms",
                    attempt=attempt_number,
                    retry=self.retry_count,
                )
                await self._sleep(delay / 1000)
                if on_retry:
                    on_retry(self.retry_count)
                continue
            except Exception:
                self.state = RetryState.FAILED_FATAL
                raise

            self.state = RetryState.SUCCEEDED
            return result

        # Unreachable: the last iteration either returns or raises
        raise RuntimeError("retry loop exited without a result")
