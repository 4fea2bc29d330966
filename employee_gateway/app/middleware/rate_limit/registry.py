"""Rate limit configuration lookup by request path."""

from typing import Dict, List, Optional, Tuple

from employee_gateway.app.core.config import RateLimitConfig, RateLimitSettings
from employee_gateway.app.core.logging import get_logger
from employee_gateway.app.middleware.rate_limit.patterns import match_path, specificity

logger = get_logger(__name__)


class RateLimitRegistry:
    """Resolves request paths to the rate limit scope that governs them.

    Endpoint patterns are tried most-specific first (see
    ``patterns.specificity``); a path matching none of them falls back to
    the global scope. The registry holds configuration only.
    """

    def __init__(self, config: RateLimitSettings):
        self._config = config
        ordered = sorted(config.endpoints.items(), key=lambda item: specificity(item[0]))
        self._patterns: List[Tuple[str, RateLimitConfig]] = ordered

    @property
    def config(self) -> RateLimitSettings:
        return self._config

    @property
    def enabled(self) -> bool:
        return self._config.enabled

    @property
    def global_config(self) -> RateLimitConfig:
        return self._config.global_

    @property
    def endpoints(self) -> Dict[str, RateLimitConfig]:
        return dict(self._config.endpoints)

    @property
    def patterns(self) -> List[str]:
        """Endpoint patterns in resolution order."""
        return [pattern for pattern, _ in self._patterns]

    def matching_pattern(self, path: str) -> Optional[str]:
        """Return the endpoint pattern that governs ``path``, if any."""
        for pattern, _ in self._patterns:
            if match_path(pattern, path):
                return pattern
        return None

    def resolve(self, path: str) -> RateLimitConfig:
        """Return the scope for ``path``: first matching pattern, else global."""
        for pattern, config in self._patterns:
            if match_path(pattern, path):
                logger.debug(
                    f"Using endpoint rate limit for path {path} with pattern {pattern}"
                )
                return config

        logger.debug(f"Using global rate limit for path {path}")
        return self._config.global_
