"""Resilience helpers (retry policy)."""

from .retry import DEFAULT_RETRY_CONFIG, RetryConfig, retry, run_with_retry

__all__ = ["DEFAULT_RETRY_CONFIG", "RetryConfig", "retry", "run_with_retry"]
