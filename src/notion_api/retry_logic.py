"""Request throttling and retry with exponential backoff for the Notion API.

Notion allows roughly three requests per second per integration. Every
request goes through a ResilientClient, which spaces request starts by a
minimum interval and retries transient failures (429 and 5xx) with
exponential backoff and jitter. Non-transient errors fail fast.
"""

import logging
import random
import time
from typing import Callable, Optional, TypeVar

from .errors import APIAccessError

logger = logging.getLogger(__name__)

T = TypeVar('T')

TRANSIENT_STATUS_CODES = frozenset({429, 500, 502, 503, 504})

MAX_ATTEMPTS = 5
MIN_REQUEST_INTERVAL = 0.34  # seconds, ~3 requests per second
BASE_DELAY = 1.0
MAX_DELAY = 30.0
JITTER_RATIO = 0.25


def _status_of(exception: Exception) -> Optional[int]:
    """Extract an HTTP status code from an exception, if it carries one."""
    status = getattr(exception, 'status', None)
    if isinstance(status, int):
        return status

    response = getattr(exception, 'response', None)
    status_code = getattr(response, 'status_code', None)
    if isinstance(status_code, int):
        return status_code

    return None


def is_transient_error(exception: Exception) -> bool:
    """Check if an exception is a rate limit or server-side failure.

    Args:
        exception: The exception to check

    Returns:
        True if the request should be retried
    """
    return _status_of(exception) in TRANSIENT_STATUS_CODES


def get_retry_hint(exception: Exception) -> Optional[float]:
    """Return the server's Retry-After hint in seconds, if any."""
    retry_after = getattr(exception, 'retry_after', None)
    if retry_after is None:
        return None
    try:
        value = float(retry_after)
    except (TypeError, ValueError):
        return None
    return value if value >= 0 else None


def compute_retry_delay(
    attempt: int,
    retry_after: Optional[float] = None,
    rng: Callable[[], float] = random.random,
    base_delay: float = BASE_DELAY,
    max_delay: float = MAX_DELAY,
) -> float:
    """Compute the wait before the next attempt.

    An explicit Retry-After hint is honoured exactly. Otherwise the delay
    doubles from base_delay (1s, 2s, 4s, ...), is perturbed by +/-25% jitter
    and capped at max_delay.

    Args:
        attempt: Zero-based index of the attempt that just failed
        retry_after: Server hint in seconds, if the response carried one
        rng: Source of uniform randoms in [0, 1)
        base_delay: Delay for the first retry
        max_delay: Upper bound for computed delays

    Returns:
        Delay in seconds
    """
    if retry_after is not None:
        return retry_after

    nominal = base_delay * (2 ** attempt)
    jitter = nominal * JITTER_RATIO * (rng() * 2 - 1)
    return min(nominal + jitter, max_delay)


class RequestThrottler:
    """Enforces a minimum spacing between request starts.

    The throttler owns the timestamp of the last request start. One instance
    is shared by every caller of a ResilientClient, so all requests made
    through it are serialized onto one clock.
    """

    def __init__(
        self,
        min_interval: float = MIN_REQUEST_INTERVAL,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.min_interval = min_interval
        self._clock = clock
        self._sleep = sleep
        self._last_request_start: Optional[float] = None

    def wait(self) -> None:
        """Block until the next request may start, then record its start."""
        if self._last_request_start is not None:
            elapsed = self._clock() - self._last_request_start
            if elapsed < self.min_interval:
                self._sleep(self.min_interval - elapsed)
        self._last_request_start = self._clock()


class ResilientClient:
    """Runs single remote operations with throttling and retry.

    Example:
        >>> client = ResilientClient()
        >>> page = client.call(lambda: session.get(url), "GET /pages/123")
    """

    def __init__(
        self,
        throttler: Optional[RequestThrottler] = None,
        max_attempts: int = MAX_ATTEMPTS,
        sleep: Callable[[float], None] = time.sleep,
        rng: Callable[[], float] = random.random,
    ):
        self.throttler = throttler or RequestThrottler(sleep=sleep)
        self.max_attempts = max_attempts
        self._sleep = sleep
        self._rng = rng

    def call(self, operation: Callable[[], T], description: str = "request") -> T:
        """Execute one remote operation.

        Args:
            operation: Zero-argument callable performing a single request
            description: Human-readable label used in logs and errors

        Returns:
            The operation's result

        Raises:
            APIAccessError: If transient failures persist for every attempt
            Other exceptions: Passed through immediately without retry
        """
        for attempt in range(self.max_attempts):
            self.throttler.wait()
            try:
                return operation()
            except Exception as e:
                # 4xx other than 429 fails fast
                if not is_transient_error(e):
                    raise

                if attempt >= self.max_attempts - 1:
                    logger.error(
                        f"{description} still failing after {self.max_attempts} attempts, giving up"
                    )
                    raise APIAccessError(
                        f"Notion API failure during {description} "
                        f"(after {self.max_attempts} attempts): {e}"
                    ) from e

                delay = compute_retry_delay(attempt, get_retry_hint(e), self._rng)
                logger.warning(
                    f"Notion API {_status_of(e)} during {description}. "
                    f"Retrying in {delay:.2f}s (attempt {attempt + 1}/{self.max_attempts})"
                )
                self._sleep(delay)

        # max_attempts < 1 never runs the loop
        raise APIAccessError(f"Notion API failure during {description} (no attempts made)")
