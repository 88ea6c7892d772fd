"""Retry policy for the chat completion call site.

The capability cache never retries (one fetch attempt per refresh); retry
belongs to the outbound chat request only. Backoff is exponential:
``initial_delay * delay_base ** attempt``.
"""
from __future__ import annotations

import functools
import time
from dataclasses import dataclass
from typing import Callable, Iterable, Protocol, TypeVar

from ..errors import ErrorCode, ProviderError

T = TypeVar("T")


class AttemptLogger(Protocol):  # pragma: no cover - structural protocol
    def __call__(
        self,
        *,
        attempt: int,
        max_attempts: int,
        delay: float | None,
        error: ProviderError | None,
    ) -> None: ...


@dataclass(frozen=True)
class RetryConfig:
    max_attempts: int = 4
    initial_delay: float = 1.0
    delay_base: float = 2.0
    retryable_codes: tuple[ErrorCode, ...] = (
        ErrorCode.TRANSIENT,
        ErrorCode.RATE_LIMIT,
        ErrorCode.TIMEOUT,
        ErrorCode.SERVER_ERROR,
        ErrorCode.UNAVAILABLE,
    )
    attempt_logger: AttemptLogger | None = None
    sleep: Callable[[float], None] = time.sleep

    def delays(self) -> Iterable[float]:
        for attempt in range(max(self.max_attempts, 1) - 1):
            yield self.initial_delay * self.delay_base**attempt

    @classmethod
    def from_options(
        cls,
        *,
        enable_retry: bool,
        max_retries: int,
        retry_delay_ms: float,
        attempt_logger: AttemptLogger | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> "RetryConfig":
        """Build a config from node-style options (retries excludes the first attempt)."""
        attempts = max(int(max_retries), 0) + 1 if enable_retry else 1
        return cls(
            max_attempts=attempts,
            initial_delay=max(float(retry_delay_ms), 0.0) / 1000.0,
            attempt_logger=attempt_logger,
            sleep=sleep,
        )


DEFAULT_RETRY_CONFIG = RetryConfig()


def run_with_retry(func: Callable[[], T], config: RetryConfig = DEFAULT_RETRY_CONFIG) -> tuple[T, int]:
    """Call ``func`` under ``config`` and return ``(result, retries_used)``.

    Only :class:`ProviderError` instances whose code is in
    ``config.retryable_codes`` are retried; anything else propagates on the
    first occurrence. The last error is re-raised once attempts run out.
    """
    schedule = list(config.delays()) + [None]
    for attempt, delay in enumerate(schedule):
        try:
            result = func()
        except ProviderError as e:
            if config.attempt_logger:
                config.attempt_logger(
                    attempt=attempt,
                    max_attempts=config.max_attempts,
                    delay=delay,
                    error=e,
                )
            if e.code in config.retryable_codes and delay is not None:
                config.sleep(delay)
                continue
            raise
        if config.attempt_logger:
            config.attempt_logger(
                attempt=attempt,
                max_attempts=config.max_attempts,
                delay=None,
                error=None,
            )
        return result, attempt
    raise RuntimeError("retry: schedule exhausted without result")  # pragma: no cover


def retry(config: RetryConfig = DEFAULT_RETRY_CONFIG):
    """Decorator form of :func:`run_with_retry` (drops the retry count)."""

    def decorator(func: Callable[..., T]) -> Callable[..., T]:
        @functools.wraps(func)
        def wrapper(*args, **kwargs) -> T:
            result, _ = run_with_retry(lambda: func(*args, **kwargs), config)
            return result

        return wrapper

    return decorator


__all__ = [
    "AttemptLogger",
    "RetryConfig",
    "DEFAULT_RETRY_CONFIG",
    "run_with_retry",
    "retry",
]
