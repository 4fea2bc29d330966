"""API endpoints package for the employee gateway."""

from employee_gateway.app.api.employee import router as employee_router

__all__ = [
    "employee_router",
]
