"""Retry policy and error taxonomy for calls to Gemini and the YouTube Data API."""

import logging
import random
import time
from functools import wraps
from typing import Callable

logger = logging.getLogger(__name__)


class RetryableError(Exception):
    """A transient upstream failure; the same call may succeed if repeated."""


class APIRateLimitError(RetryableError):
    """Rate limit or quota exhausted (HTTP 429, RESOURCE_EXHAUSTED)."""


class NetworkError(RetryableError):
    """Timeouts, refused connections and unexpected non-2xx answers."""


class TemporaryServiceError(RetryableError):
    """Upstream reported itself unavailable (5xx)."""


class MalformedResponseError(Exception):
    """Upstream answered, but not in the shape we parse."""


class DeadlineExceededError(Exception):
    """The request deadline passed before the work could start."""


def backoff_delay(attempt: int, base_delay: float, max_delay: float) -> float:
    """Seconds to wait before retry number ``attempt + 1``: doubling, capped, plus up to 10% jitter."""
    delay = min(base_delay * (2 ** attempt), max_delay)
    return delay + random.uniform(0, delay * 0.1)


def retry_api_call(max_retries: int = 3, base_delay: float = 2.0, max_delay: float = 30.0):
    """Retry the decorated call while it raises a RetryableError.

    When the call is made with a ``deadline`` keyword (monotonic seconds),
    no retry is scheduled whose wait would end past that deadline; the
    last error is raised instead. Other exceptions propagate at once.
    """
    def decorator(func: Callable) -> Callable:
        @wraps(func)
        def wrapper(*args, **kwargs):
            deadline = kwargs.get("deadline")
            attempt = 0
            while True:
                try:
                    return func(*args, **kwargs)
                except RetryableError as e:
                    delay = backoff_delay(attempt, base_delay, max_delay)
                    if attempt >= max_retries:
                        logger.error(f"{func.__name__} failed after {attempt + 1} attempts: {e}")
                        raise
                    if deadline is not None and time.monotonic() + delay >= deadline:
                        logger.error(f"{func.__name__} failed and no time is left to retry: {e}")
                        raise
                    logger.warning(f"{func.__name__} attempt {attempt + 1} failed: {e}. Retrying in {delay:.1f}s")
                    time.sleep(delay)
                    attempt += 1

        return wrapper
    return decorator


def classify_api_error(error: Exception) -> Exception:
    """Map a raw client exception onto the retryable errors by its message.

    Returns ``error`` itself when nothing suggests the failure is transient.
    """
    message = str(error).lower()
    if any(marker in message for marker in ("rate limit", "resource_exhausted", "429", "quota")):
        return APIRateLimitError(f"Rate limit hit: {error}")
    if any(marker in message for marker in ("connection", "timed out", "timeout", "network")):
        return NetworkError(f"Network error: {error}")
    if "unavailable" in message or "503" in message:
        return TemporaryServiceError(f"Service unavailable: {error}")
    return error
