"""Admission control: one token-bucket decision per inbound request."""

import time
from typing import Callable

from employee_gateway.app.core.config import RateLimitConfig, RateLimitSettings
from employee_gateway.app.core.logging import get_log_context, get_logger
from employee_gateway.app.middleware.rate_limit.models import AdmissionResult
from employee_gateway.app.middleware.rate_limit.registry import RateLimitRegistry
from employee_gateway.app.middleware.rate_limit.store import BucketStore

logger = get_logger(__name__)


def bucket_key(client_id: str, path: str, config: RateLimitConfig) -> str:
    """Build the bucket key for a client, path and scope shape.

    The shape is part of the key, so a configuration change starts fresh
    buckets and leaves the old ones orphaned until the next reset.
    """
    return (
        f"{client_id}:{path}:{config.capacity}:{config.refill_tokens}:"
        f"{config.refill_period.total_seconds():g}"
    )


class AdmissionController:
    """Decides whether a (client, path) request may proceed.

    One instance is created per application and shared by the rate limit
    middleware and the admin routes through ``app.state``.
    """

    def __init__(self, registry: RateLimitRegistry, store: BucketStore):
        self.registry = registry
        self.store = store

    @classmethod
    def from_settings(
        cls,
        config: RateLimitSettings,
        clock: Callable[[], float] = time.monotonic,
    ) -> "AdmissionController":
        return cls(RateLimitRegistry(config), BucketStore(clock=clock))

    def admit(self, client_id: str, path: str) -> AdmissionResult:
        """Run the admission check and consume one token when allowed."""
        if not self.registry.enabled:
            return AdmissionResult(allowed=True, message="")

        config = self.registry.resolve(path)
        if not config.enabled:
            return AdmissionResult(allowed=True, message=config.error_message)

        key = bucket_key(client_id, path, config)
        bucket = self.store.get_or_create(key, config)
        allowed = self.store.try_consume(bucket, 1)

        if allowed:
            logger.debug(
                f"Request allowed for client {client_id} on {path}, "
                f"remaining tokens: {bucket.tokens}",
                extra=get_log_context(client_id=client_id, path=path),
            )
        else:
            logger.warning(
                f"Rate limit exceeded for client {client_id} on {path}",
                extra=get_log_context(client_id=client_id, path=path),
            )

        return AdmissionResult(allowed=allowed, message=config.error_message)

    def error_message_for(self, path: str) -> str:
        return self.registry.resolve(path).error_message

    def bucket_count(self) -> int:
        return self.store.count()

    def reset(self) -> None:
        """Clear every bucket, restoring full quota to all clients."""
        self.store.clear_all()
        logger.info("All rate limit buckets cleared")
