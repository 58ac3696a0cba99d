"""Per-client request throttling for Lambda handlers

A client (identified by its IP address) may make one request per `limit`
seconds. Visitors are tracked in memory, so the limit applies per warm Lambda
container (or per local process), not globally.

Example:
    >>> limiter = RateLimiter(limit=1.0, cleanup_interval=300.0).start()
    >>> limiter.allow('203.0.113.7')
    True
    >>> limiter.allow('203.0.113.7')
    False
    >>> limiter.stop()

    >>> @rate_limited(limiter)
    ... def lambda_handler(event, context):
    ...     ...
"""

import math
import time
import logging
import functools
import threading
from collections.abc import Callable

from shortly.types import LambdaEvent, LambdaContext, LambdaResponse
from shortly.constants import RateLimit
from shortly.utils.runtime import get_client_ip
from shortly.lambdas.responses import response_429


logger = logging.getLogger(__name__)


class RateLimiter:
    """Thread-safe per-client limiter with a background cleanup thread.

    Attributes:
        limit (float):
            Minimum number of seconds between two allowed requests of a client.
        cleanup_interval (float):
            Seconds between sweeps which forget visitors idle for longer than `limit`.
    """

    def __init__(
        self,
        limit: float = RateLimit.WINDOW,
        cleanup_interval: float = RateLimit.CLEANUP_INTERVAL,
        clock: Callable[[], float] = time.monotonic,
    ):
        if limit <= 0:
            raise ValueError(f'Rate limit must be positive (given value: {limit}).')
        if cleanup_interval <= 0:
            raise ValueError(f'Cleanup interval must be positive (given value: {cleanup_interval}).')

        self.limit = limit
        self.cleanup_interval = cleanup_interval
        self._clock = clock
        self._visitors: dict[str, float] = {}
        self._lock = threading.Lock()
        self._stop_event = threading.Event()
        self._cleanup_thread: threading.Thread | None = None

    def __len__(self) -> int:
        with self._lock:
            return len(self._visitors)

    def start(self) -> 'RateLimiter':
        """Start the background cleanup thread (no-op if already running)."""
        if self._cleanup_thread is not None and self._cleanup_thread.is_alive():
            return self

        self._stop_event.clear()
        self._cleanup_thread = threading.Thread(target=self._cleanup_loop, name='rate-limiter-cleanup', daemon=True)
        self._cleanup_thread.start()
        return self

    def stop(self, timeout: float | None = None) -> None:
        """Signal the cleanup thread to exit and wait for it."""
        self._stop_event.set()
        if self._cleanup_thread is not None:
            self._cleanup_thread.join(timeout)
            self._cleanup_thread = None

    def allow(self, client_id: str) -> bool:
        """Record a request of `client_id` and tell whether it is allowed."""
        now = self._clock()
        with self._lock:
            last_seen = self._visitors.get(client_id)
            if last_seen is not None and now - last_seen < self.limit:
                return False
            self._visitors[client_id] = now
            return True

    def retry_after(self, client_id: str) -> int:
        """Whole seconds until `client_id` may make its next request (at least 1)."""
        now = self._clock()
        with self._lock:
            last_seen = self._visitors.get(client_id)
        if last_seen is None:
            return 0
        remaining = self.limit - (now - last_seen)
        return max(1, math.ceil(remaining))

    def cleanup(self) -> int:
        """Forget visitors idle for longer than `limit`. Returns how many were removed."""
        now = self._clock()
        with self._lock:
            stale = [client_id for client_id, last_seen in self._visitors.items() if now - last_seen > self.limit]
            for client_id in stale:
                del self._visitors[client_id]
        return len(stale)

    def _cleanup_loop(self) -> None:
        while not self._stop_event.wait(self.cleanup_interval):
            removed = self.cleanup()
            if removed:
                logger.debug('Removed idle visitors from rate limiter.', extra={'removed': removed})


def rate_limited(limiter: RateLimiter) -> Callable:
    """Decorator: answer HTTP 429 with a `Retry-After` header for throttled clients.

    Requests without a resolvable client IP are never throttled.
    """

    def decorator(func: Callable[[LambdaEvent, LambdaContext], LambdaResponse]) -> Callable:
        @functools.wraps(func)
        def wrapper(event: LambdaEvent, context: LambdaContext) -> LambdaResponse:
            client_ip = get_client_ip(event)
            if client_ip is not None and not limiter.allow(client_ip):
                retry_after = limiter.retry_after(client_ip)
                logger.info(
                    'Client exceeded request rate. Responding with 429.',
                    extra={'clientIp': client_ip, 'retryAfter': retry_after},
                )
                return response_429(retry_after=retry_after)
            return func(event, context)

        return wrapper

    return decorator
