"""Rate limiting middleware for the employee gateway.

Applies per-client token bucket admission control ahead of every routed
handler. Scopes are resolved from glob path patterns with a global fallback;
denied requests are answered with HTTP 429 and never reach the handler.
"""

from fastapi import Request, Response
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint

from employee_gateway.app.core.logging import get_log_context, get_logger

# Re-export models and components
from employee_gateway.app.middleware.rate_limit.models import (
    AdmissionResult,
    TokenBucket,
)
from employee_gateway.app.middleware.rate_limit.registry import RateLimitRegistry
from employee_gateway.app.middleware.rate_limit.store import BucketStore
from employee_gateway.app.middleware.rate_limit.admission import (
    AdmissionController,
    bucket_key,
)

logger = get_logger(__name__)

__all__ = [
    # Models
    "AdmissionResult",
    "TokenBucket",
    # Components
    "RateLimitRegistry",
    "BucketStore",
    "AdmissionController",
    "bucket_key",
    # Middleware
    "RateLimitMiddleware",
    "get_client_id",
    "rate_limit_exceeded_response",
]


def get_client_id(request: Request) -> str:
    """Extract the rate limit identity from a request.

    Precedence: first ``X-Forwarded-For`` entry, then ``X-Real-IP``, then the
    transport peer address. Both headers are client-controlled, so the edge
    proxy must overwrite them for limits to hold.
    """
    forwarded_for = request.headers.get("X-Forwarded-For")
    if forwarded_for:
        first = forwarded_for.split(",")[0].strip()
        if first:
            return first

    real_ip = request.headers.get("X-Real-IP")
    if real_ip:
        return real_ip.strip()

    return request.client.host if request.client else "unknown"


def rate_limit_exceeded_response(message: str) -> JSONResponse:
    """Build the 429 response sent to denied callers."""
    return JSONResponse(
        status_code=429,
        content={"status": "error", "message": message, "code": 429},
    )


class RateLimitMiddleware(BaseHTTPMiddleware):
    """Middleware to enforce token bucket rate limits on requests.

    Args:
        app: The ASGI application
        controller: Shared admission controller (also used by the admin routes)
    """

    def __init__(self, app, controller: AdmissionController):
        super().__init__(app)
        self.controller = controller

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint
    ) -> Response:
        """Admit or reject the request before it reaches the router."""
        client_id = get_client_id(request)
        path = request.url.path

        logger.debug(f"Processing rate limit check for client {client_id} on {path}")
        result = self.controller.admit(client_id, path)

        if not result.allowed:
            logger.warning(
                f"Rejected request to {path} with 429",
                extra=get_log_context(
                    request_id=getattr(request.state, "request_id", None),
                    client_id=client_id,
                    path=path,
                    method=request.method,
                    status_code=429,
                ),
            )
            return rate_limit_exceeded_response(result.message)

        return await call_next(request)
