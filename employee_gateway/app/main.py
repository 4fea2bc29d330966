import time
from contextlib import asynccontextmanager
from datetime import datetime
from typing import Any, AsyncGenerator, Callable, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from employee_gateway.app.api.admin.router import router as admin_router
from employee_gateway.app.api.employee import router as employee_router
from employee_gateway.app.core.config import Settings, settings as default_settings
from employee_gateway.app.core.http_client import init_http_client
from employee_gateway.app.core.logging import get_logger, setup_logging
from employee_gateway.app.core.retry import RetryPolicy
from employee_gateway.app.exceptions import GatewayException
from employee_gateway.app.middleware.rate_limit import AdmissionController, RateLimitMiddleware
from employee_gateway.app.middleware.request_id import RequestIdMiddleware, get_request_id
from employee_gateway.app.services.employee import EmployeeService, MockEmployeeClient


def _error_body(error: str, message: str, status: int, **extra: Any) -> dict[str, Any]:
    body: dict[str, Any] = {
        "error": error,
        "message": message,
        "status": status,
        "timestamp": datetime.now().astimezone().isoformat(),
    }
    body.update({k: v for k, v in extra.items() if v is not None})
    return body


def create_app(
    app_settings: Optional[Settings] = None,
    clock: Callable[[], float] = time.monotonic,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        app_settings: Settings to use instead of the environment-loaded ones
        clock: Time source for the rate limit buckets

    Returns:
        Configured FastAPI application instance
    """
    config = app_settings or default_settings

    setup_logging(config)
    logger = get_logger(__name__)

    # One controller per app, shared by the middleware and the admin routes
    admission_controller = AdmissionController.from_settings(config.rate_limit, clock=clock)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        """Open the shared HTTP client and wire the employee service to it."""
        async with init_http_client(config) as http_client:
            client = MockEmployeeClient(
                base_url=config.mock_employee_base_url,
                http_client=http_client,
                retry_policy=RetryPolicy(
                    max_retries=config.upstream_max_retries,
                    base_delay=config.upstream_retry_base_delay,
                ),
            )
            app.state.employee_service = EmployeeService(client)

            logger.info(
                "Application startup complete",
                extra={
                    "rate_limit_enabled": config.rate_limit.enabled,
                    "endpoint_patterns": admission_controller.registry.patterns,
                    "management_enabled": config.rate_limit.management_enabled,
                },
            )
            yield

        logger.info("Application shutdown complete")

    app = FastAPI(
        title="Employee Gateway",
        description="Employee CRUD API with per-client token bucket rate limiting",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.settings = config
    app.state.admission_controller = admission_controller

    # Add middleware (order matters: last added = first executed)
    # Rate limit middleware (innermost - runs right before routing)
    app.add_middleware(RateLimitMiddleware, controller=admission_controller)

    # Request ID middleware, so rate limit logs carry the request ID
    app.add_middleware(RequestIdMiddleware)

    # CORS middleware (outermost - handles preflight requests first)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "DELETE", "OPTIONS"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
        max_age=600,
    )

    # Include routers
    app.include_router(employee_router)
    if config.rate_limit.management_enabled:
        app.include_router(admin_router)
    else:
        logger.info("Rate limit management endpoints disabled")

    @app.get("/health")
    async def health() -> dict[str, Any]:
        """Liveness check with rate limiter summary."""
        return {
            "status": "ok",
            "rate_limit": {
                "enabled": admission_controller.registry.enabled,
                "active_buckets": admission_controller.bucket_count(),
            },
        }

    @app.exception_handler(GatewayException)
    async def gateway_exception_handler(request: Request, exc: GatewayException) -> JSONResponse:
        """Render gateway exceptions with their mapped HTTP status."""
        if exc.status_code >= 500:
            logger.error(
                f"{type(exc).__name__}: {exc.message}",
                exc_info=exc.__cause__ is not None,
                extra={"request_id": get_request_id(request)},
            )
        else:
            logger.info(f"{type(exc).__name__}: {exc.message}")

        return JSONResponse(
            status_code=exc.status_code,
            content=_error_body(
                exc.error,
                exc.public_message or exc.message,
                exc.status_code,
                detail=exc.message if config.debug and exc.public_message else None,
            ),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        """Return 400 with per-field messages."""
        field_errors: dict[str, str] = {}
        for error in exc.errors():
            loc = [str(part) for part in error.get("loc", ()) if part != "body"]
            field_errors[".".join(loc) or "body"] = error.get("msg", "Invalid value")

        logger.info("Request validation failed", extra={"field_errors": field_errors})
        return JSONResponse(
            status_code=400,
            content=_error_body(
                "Validation failed",
                "Please check the provided data and try again",
                400,
                field_errors=field_errors,
            ),
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        """Catch-all: log server-side, never return a traceback."""
        request_id = get_request_id(request)
        logger.exception(
            f"Unhandled exception [request_id={request_id}]",
            extra={"request_id": request_id, "exception_type": type(exc).__name__},
        )

        message = str(exc) if config.debug else "Something went wrong on our end. Please try again later."
        return JSONResponse(
            status_code=500,
            content=_error_body("Internal server error", message, 500, request_id=request_id),
        )

    return app


# Create the application instance
app = create_app()
