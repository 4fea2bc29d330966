"""Core utilities for the employee gateway application."""

from employee_gateway.app.core.config import (
    RateLimitConfig,
    RateLimitSettings,
    Settings,
    settings,
)
from employee_gateway.app.core.logging import get_logger, setup_logging

__all__ = [
    "RateLimitConfig",
    "RateLimitSettings",
    "Settings",
    "settings",
    "get_logger",
    "setup_logging",
]
