"""Bounded exponential-backoff retry for async network operations.

Every outbound call goes through execute(). Only transient failures are
retried; once attempts run out the exception from the last real attempt is
re-raised unchanged.
"""

from dataclasses import dataclass
from typing import Awaitable, Callable, TypeVar

import httpx
import openai
from tenacity import AsyncRetrying, RetryCallState, retry_if_exception, stop_after_attempt, wait_exponential

from .errors import TransportError
from .http_client import is_transient_status
from .log import get_logger

logger = get_logger("retry")

T = TypeVar("T")


@dataclass(frozen=True)
class RetryPolicy:
    base_delay: float = 0.1
    max_delay: float = 5.0
    max_attempts: int = 3


DEFAULT_POLICY = RetryPolicy()


def is_transient(exc: BaseException) -> bool:
    if isinstance(exc, TransportError):
        return exc.transient
    if isinstance(exc, httpx.HTTPStatusError):
        return is_transient_status(exc.response.status_code)
    if isinstance(exc, httpx.TransportError):
        return True
    if isinstance(exc, openai.APIConnectionError):
        return True
    if isinstance(exc, openai.APIStatusError):
        return is_transient_status(exc.status_code)
    return False


def _log_retry(retry_state: RetryCallState):
    exc = retry_state.outcome.exception()
    delay = retry_state.next_action.sleep if retry_state.next_action else 0
    logger.warning(
        f"Attempt {retry_state.attempt_number} failed ({type(exc).__name__}: {exc}), "
        f"retrying in {delay:.2f}s"
    )


async def execute(operation: Callable[[], Awaitable[T]], policy: RetryPolicy = DEFAULT_POLICY) -> T:
    """
    Await `operation()` until it succeeds, raises a non-transient error,
    or `policy.max_attempts` attempts have been made.
    `operation` is called afresh on every attempt, so per-attempt state
    (e.g. idempotency keys) belongs inside it.
    """
    retrying = AsyncRetrying(
        retry=retry_if_exception(is_transient),
        stop=stop_after_attempt(policy.max_attempts),
        wait=wait_exponential(multiplier=policy.base_delay, max=policy.max_delay),
        before_sleep=_log_retry,
        reraise=True,
    )
    return await retrying(operation)
