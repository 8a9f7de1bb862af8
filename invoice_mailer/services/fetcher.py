"""
Rate-limited binary fetcher for invoice PDFs.
"""

import threading
import time
from collections import deque
from typing import Callable, Protocol

import httpx

from invoice_mailer.config import settings
from invoice_mailer.core.logging import get_logger

log = get_logger(__name__)


class Fetcher(Protocol):
    """Binary fetch capability."""

    def fetch(self, url: str) -> bytes: ...


class RateLimiter:
    """Sliding one-second window shared by every caller.

    acquire() blocks until a slot frees up; callers over the limit queue,
    they never fail.
    """

    def __init__(
        self,
        max_per_second: int = 80,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ):
        if max_per_second < 1:
            raise ValueError(f"max_per_second must be >= 1, got {max_per_second}")
        self.max_per_second = max_per_second
        self._clock = clock
        self._sleep = sleep
        self._sent: deque[float] = deque()
        self._lock = threading.Lock()

    def acquire(self) -> None:
        while True:
            with self._lock:
                now = self._clock()
                while self._sent and now - self._sent[0] >= 1.0:
                    self._sent.popleft()
                if len(self._sent) < self.max_per_second:
                    self._sent.append(now)
                    return
                wait = 1.0 - (now - self._sent[0])
            self._sleep(wait)


class RateLimitedFetcher:
    """httpx client wrapper that takes a limiter slot before every GET."""

    def __init__(
        self,
        client: httpx.Client | None = None,
        limiter: RateLimiter | None = None,
        timeout: float | None = None,
    ):
        self._owns_client = client is None
        self.timeout = timeout if timeout is not None else settings.download_timeout_seconds
        self.client = client or httpx.Client(timeout=self.timeout)
        self.limiter = limiter or RateLimiter(settings.max_requests_per_second)

    def fetch(self, url: str) -> bytes:
        """
        Download url as raw bytes.

        Raises:
            httpx.HTTPError: transport failure, timeout or non-2xx response
        """
        self.limiter.acquire()
        response = self.client.get(url, timeout=self.timeout, follow_redirects=True)
        response.raise_for_status()
        log.debug("document_fetched", url=url, size=len(response.content))
        return response.content

    def close(self) -> None:
        if self._owns_client:
            self.client.close()

    def __enter__(self) -> "RateLimitedFetcher":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
