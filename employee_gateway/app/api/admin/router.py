from fastapi import APIRouter, Depends

from employee_gateway.app.middleware.auth import require_admin

router = APIRouter(prefix="/api/v1/admin", tags=["admin"], dependencies=[Depends(require_admin)])

# Sub-routers will be included here
from . import rate_limit  # noqa: E402

router.include_router(rate_limit.router, prefix="/rate-limit", tags=["admin-rate-limit"])
