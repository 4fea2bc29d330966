import json
import re
from datetime import timedelta
from typing import Annotated, Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


DEFAULT_ERROR_MESSAGE = "Rate limit exceeded. Please try again later."


def _parse_cors_origins(raw: Any) -> list[str]:
    if raw is None:
        return []
    if isinstance(raw, list):
        items = [str(v).strip() for v in raw]
        return [v for v in items if v]

    raw = str(raw).strip()
    if not raw or raw == "[]":
        return []
    if raw == "*":
        return ["*"]

    # Prefer JSON, but tolerate comma/space separated values.
    if raw.startswith("["):
        try:
            parsed = json.loads(raw)
        except json.JSONDecodeError:
            parsed = None
        if isinstance(parsed, list):
            items = [str(v).strip() for v in parsed]
            return [v for v in items if v]

    origins: list[str] = []
    for part in re.split(r"[,\s]+", raw):
        if not part:
            continue
        if part == "*":
            return ["*"]
        if "://" in part:
            origins.append(part)
        else:
            origins.append(f"http://{part}")
            origins.append(f"https://{part}")
    return list(dict.fromkeys(origins))


class RateLimitConfig(BaseModel):
    """Shape of a single token bucket scope.

    Accepts both snake_case and camelCase keys and serializes with camelCase,
    so ``refill_period`` is exposed as ``refillPeriod`` (ISO-8601 in JSON).
    ``capacity`` may be smaller than ``refill_tokens``; buckets cap refills
    at ``capacity``.
    """

    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        alias_generator=to_camel,
    )

    capacity: int = 10
    refill_tokens: int = 10
    refill_period: timedelta = timedelta(minutes=1)
    enabled: bool = True
    error_message: str = DEFAULT_ERROR_MESSAGE

    @field_validator("capacity", "refill_tokens")
    @classmethod
    def validate_positive(cls, v: int) -> int:
        """Validate token amounts are positive."""
        if v < 1:
            raise ValueError("capacity and refill tokens must be at least 1")
        return v

    @field_validator("refill_period")
    @classmethod
    def validate_refill_period(cls, v: timedelta) -> timedelta:
        """Validate refill period is positive."""
        if v <= timedelta(0):
            raise ValueError("refill period must be positive")
        return v


def _default_endpoints() -> dict[str, RateLimitConfig]:
    return {
        "/api/v1/employee/**": RateLimitConfig(
            capacity=10,
            refill_tokens=10,
            refill_period=timedelta(minutes=1),
            error_message="Employee API rate limit exceeded",
        ),
    }


class RateLimitSettings(BaseModel):
    """Rate limiting configuration: kill-switch, global scope and endpoint scopes."""

    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        alias_generator=to_camel,
    )

    enabled: bool = True
    global_: RateLimitConfig = Field(default_factory=RateLimitConfig, alias="global")
    endpoints: dict[str, RateLimitConfig] = Field(default_factory=_default_endpoints)
    # Mounts /api/v1/admin/rate-limit when True
    management_enabled: bool = False

    @field_validator("endpoints")
    @classmethod
    def validate_patterns(cls, v: dict[str, RateLimitConfig]) -> dict[str, RateLimitConfig]:
        """Validate endpoint patterns are absolute paths."""
        for pattern in v:
            if not pattern.startswith("/"):
                raise ValueError(f"endpoint pattern must start with '/': {pattern!r}")
        return v


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    All settings can be configured via environment variables or .env file.
    Nested rate limit values use a double underscore, e.g.
    ``RATE_LIMIT__GLOBAL__CAPACITY=20`` or
    ``RATE_LIMIT__ENDPOINTS='{"/api/v1/employee/**": {"capacity": 5}}'``.
    """

    # Debug mode - enables detailed error responses
    debug: bool = False

    # Mock employee backend
    mock_employee_base_url: str = "http://localhost:8112"

    # HTTP Client connection pool settings
    httpx_connect_timeout: float = 10.0
    httpx_read_timeout: float = 30.0
    httpx_write_timeout: float = 10.0
    httpx_pool_timeout: float = 5.0
    httpx_keepalive_expiry: float = 30.0
    httpx_max_connections: int = 100
    httpx_max_keepalive_connections: int = 20

    # Upstream retry policy (mock backend throttles at random)
    upstream_max_retries: int = 2
    upstream_retry_base_delay: float = 0.5

    # Rate limiting
    rate_limit: RateLimitSettings = Field(default_factory=RateLimitSettings)

    # Admin surface bearer token; empty leaves the admin routes open
    admin_token: str = ""

    # Logging settings
    log_level: str = "INFO"
    log_format: str = "text"  # text | structured | json

    # CORS settings
    cors_origins: Annotated[list[str], NoDecode] = ["*"]

    @field_validator("cors_origins", mode="before")
    @classmethod
    def decode_cors_origins(cls, v: Any) -> list[str]:
        return _parse_cors_origins(v)

    @field_validator("admin_token")
    @classmethod
    def strip_admin_token(cls, v: str) -> str:
        # Secret stores often append a trailing newline
        return v.strip()

    @field_validator(
        "httpx_connect_timeout",
        "httpx_read_timeout",
        "httpx_write_timeout",
        "httpx_pool_timeout",
    )
    @classmethod
    def validate_timeout_positive(cls, v: float) -> float:
        """Validate timeout values are positive."""
        if v <= 0:
            raise ValueError("Timeout values must be positive")
        return v

    @field_validator("httpx_max_connections", "httpx_max_keepalive_connections")
    @classmethod
    def validate_pool_size_positive(cls, v: int) -> int:
        """Validate pool limits are positive."""
        if v < 1:
            raise ValueError("pool size values must be at least 1")
        return v

    @field_validator("upstream_max_retries")
    @classmethod
    def validate_retries(cls, v: int) -> int:
        if v < 0:
            raise ValueError("upstream_max_retries cannot be negative")
        return v

    model_config = SettingsConfigDict(
        env_file=".env",
        env_nested_delimiter="__",
        extra="ignore",
    )


# Global settings instance
settings = Settings()
