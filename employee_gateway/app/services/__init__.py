"""Services package for the employee gateway."""

from employee_gateway.app.services.employee import (
    CreateEmployeeInput,
    Employee,
    EmployeeService,
    MockEmployeeClient,
)

__all__ = [
    "CreateEmployeeInput",
    "Employee",
    "EmployeeService",
    "MockEmployeeClient",
]
