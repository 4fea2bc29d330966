"""Rate limit management endpoints.

Read-only introspection of the rate limit configuration plus a reset that
drops every token bucket. Mounted only when ``RATE_LIMIT__MANAGEMENT_ENABLED``
is true.
"""

from typing import Annotated, Any

from fastapi import APIRouter, Depends, Request

from employee_gateway.app.core.logging import get_logger
from employee_gateway.app.middleware.rate_limit import AdmissionController

logger = get_logger(__name__)
router = APIRouter()

SUCCESS_STATUS = "Successfully processed request."


def get_admission_controller(request: Request) -> AdmissionController:
    return request.app.state.admission_controller


ControllerDep = Annotated[AdmissionController, Depends(get_admission_controller)]


def handled_with(data: Any) -> dict[str, Any]:
    """Wrap a payload in the standard response envelope."""
    return {"data": data, "status": SUCCESS_STATUS}


@router.get("/config")
async def get_configuration(controller: ControllerDep) -> dict[str, Any]:
    """Get the current rate limiting configuration."""
    logger.debug("Retrieving rate limiting configuration")
    return handled_with(controller.registry.config.model_dump(mode="json", by_alias=True))


@router.get("/stats")
async def get_statistics(controller: ControllerDep) -> dict[str, Any]:
    """Get rate limiting statistics."""
    logger.debug("Retrieving rate limiting statistics")
    registry = controller.registry
    return handled_with(
        {
            "enabled": registry.enabled,
            "activeBuckets": controller.bucket_count(),
            "globalConfig": registry.global_config.model_dump(mode="json", by_alias=True),
            "endpointConfigs": {
                pattern: config.model_dump(mode="json", by_alias=True)
                for pattern, config in registry.endpoints.items()
            },
        }
    )


@router.get("/status")
async def get_status(controller: ControllerDep) -> dict[str, Any]:
    """Check whether rate limiting is enabled."""
    registry = controller.registry
    return handled_with(
        {
            "enabled": registry.enabled,
            "globalEnabled": registry.global_config.enabled,
            "endpointCount": len(registry.endpoints),
        }
    )


@router.post("/reset")
async def reset_rate_limits(controller: ControllerDep) -> dict[str, Any]:
    """Clear all rate limiting buckets."""
    logger.info("Resetting all rate limiting buckets")
    controller.reset()
    return handled_with("All rate limiting buckets have been cleared")
