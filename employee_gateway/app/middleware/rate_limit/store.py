"""In-memory token bucket store.

Buckets are created lazily per key and live until ``clear_all``. There is
no per-bucket expiry, so memory grows with the number of distinct
(client, path) pairs seen; the admin reset endpoint is the only release.
"""

import threading
import time
from typing import Callable, Dict

from employee_gateway.app.core.config import RateLimitConfig
from employee_gateway.app.middleware.rate_limit.models import TokenBucket


class BucketStore:
    """Thread-safe key -> token bucket map.

    The store lock only guards the map. Each bucket carries its own lock for
    refill-and-consume, so checks against different buckets never contend.

    Args:
        clock: Monotonic time source in seconds. Tests pass a fake clock.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self._clock = clock
        self._buckets: Dict[str, TokenBucket] = {}
        self._lock = threading.Lock()

    def get_or_create(self, key: str, config: RateLimitConfig) -> TokenBucket:
        """Return the bucket for ``key``, creating a full one on first access.

        Concurrent first accesses for the same key all receive the same bucket.
        """
        bucket = self._buckets.get(key)
        if bucket is not None:
            return bucket

        with self._lock:
            bucket = self._buckets.get(key)
            if bucket is None:
                bucket = TokenBucket.full(config, self._clock())
                self._buckets[key] = bucket
            return bucket

    def try_consume(self, bucket: TokenBucket, tokens: int = 1) -> bool:
        """Consume ``tokens`` after applying owed refills.

        Returns False and leaves the bucket untouched when too few tokens
        are available.
        """
        with bucket.lock:
            self._refill(bucket)
            if bucket.tokens >= tokens:
                bucket.tokens -= tokens
                return True
            return False

    def available_tokens(self, bucket: TokenBucket) -> int:
        with bucket.lock:
            self._refill(bucket)
            return bucket.tokens

    def _refill(self, bucket: TokenBucket) -> None:
        # Caller holds bucket.lock
        elapsed = self._clock() - bucket.last_refill
        if elapsed < bucket.refill_period:
            return
        intervals = int(elapsed // bucket.refill_period)
        bucket.tokens = min(bucket.capacity, bucket.tokens + intervals * bucket.refill_tokens)
        # Partial progress toward the next interval carries over
        bucket.last_refill += intervals * bucket.refill_period

    def clear_all(self) -> None:
        """Drop every bucket. Concurrent admissions may repopulate immediately."""
        with self._lock:
            self._buckets.clear()

    def count(self) -> int:
        return len(self._buckets)
