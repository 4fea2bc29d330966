"""Rate limiting data models.

This module contains dataclasses for token bucket state and admission results.
"""

import threading
from dataclasses import dataclass, field

from employee_gateway.app.core.config import RateLimitConfig


@dataclass
class AdmissionResult:
    """Result of an admission check."""
    allowed: bool
    message: str


@dataclass
class TokenBucket:
    """Token bucket state for interval-refill admission control.

    ``last_refill`` is a reading of the owning store's clock, in seconds.
    ``lock`` guards ``tokens`` and ``last_refill``; the store holds it for
    every refill-and-consume step.
    """
    capacity: int
    refill_tokens: int
    refill_period: float
    tokens: int
    last_refill: float
    lock: threading.Lock = field(default_factory=threading.Lock, repr=False, compare=False)

    @classmethod
    def full(cls, config: RateLimitConfig, now: float) -> "TokenBucket":
        """Create a bucket holding ``config.capacity`` tokens."""
        return cls(
            capacity=config.capacity,
            refill_tokens=config.refill_tokens,
            refill_period=config.refill_period.total_seconds(),
            tokens=config.capacity,
            last_refill=now,
        )
