"""Retry helper for metrics senders.

The listener never retries a failed flush; a sender that talks to a flaky
endpoint opts in by wrapping its send call with ``with_retry``.

Implementation: Uses tenacity library internally for the retry loop.
"""

from __future__ import annotations

import logging
from functools import wraps
from typing import Any, Callable, Optional, Tuple, Type, TypeVar

import tenacity
from tenacity.wait import wait_base

logger = logging.getLogger(__name__)

__all__ = ["with_retry"]

F = TypeVar("F", bound=Callable[..., Any])


def with_retry(
    max_attempts: int = 3,
    backoff_seconds: float = 1.0,
    exponential: bool = True,
    jitter: bool = True,
    retry_exceptions: Optional[Tuple[Type[BaseException], ...]] = None,
    retry_if: Optional[Callable[[BaseException], bool]] = None,
) -> Callable[[F], F]:
    """Opt-in retry decorator for flaky send operations.

    Args:
        max_attempts: Maximum number of attempts (default 3)
        backoff_seconds: Base delay between attempts (default 1.0)
        exponential: Use exponential backoff (default True)
        jitter: Add random jitter to backoff (default True)
        retry_exceptions: Only retry on these exceptions (default: all)
        retry_if: Predicate on the raised exception; overrides retry_exceptions

    Example:
        @with_retry(max_attempts=3, backoff_seconds=0.5)
        def post(body: str) -> None:
            session.post(url, data=body).raise_for_status()
    """
    wait_strategy: wait_base
    if exponential:
        # backoff_seconds * 2^(attempt-1)
        wait_strategy = tenacity.wait_exponential(multiplier=backoff_seconds, min=backoff_seconds)
    else:
        wait_strategy = tenacity.wait_fixed(backoff_seconds)

    if jitter:
        wait_strategy = wait_strategy + tenacity.wait_random(0, backoff_seconds * 0.5)

    if retry_if is not None:
        retry_condition = tenacity.retry_if_exception(retry_if)
    elif retry_exceptions:
        retry_condition = tenacity.retry_if_exception_type(retry_exceptions)
    else:
        retry_condition = tenacity.retry_if_exception_type(Exception)

    def decorator(fn: F) -> F:
        fn_logger = logging.getLogger(fn.__module__)

        def before_sleep_handler(retry_state: tenacity.RetryCallState) -> None:
            exception = retry_state.outcome.exception() if retry_state.outcome else None
            fn_logger.warning(
                "Attempt %d/%d failed: %s. Retrying in %.1fs...",
                retry_state.attempt_number,
                max_attempts,
                exception,
                retry_state.next_action.sleep if retry_state.next_action else 0,
            )

        tenacity_decorator = tenacity.retry(
            stop=tenacity.stop_after_attempt(max_attempts),
            wait=wait_strategy,
            retry=retry_condition,
            before_sleep=before_sleep_handler,
            reraise=True,
        )
        retrying_fn = tenacity_decorator(fn)

        @wraps(fn)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            return retrying_fn(*args, **kwargs)

        return wrapper  # type: ignore

    return decorator
