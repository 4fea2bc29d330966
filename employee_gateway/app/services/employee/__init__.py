"""Employee service package.

- models.py: API and mock backend payloads
- client.py: HTTP client for the mock employee backend
- service.py: Employee operations
"""

from employee_gateway.app.services.employee.models import (
    CreateEmployeeInput,
    Employee,
)
from employee_gateway.app.services.employee.client import MockEmployeeClient
from employee_gateway.app.services.employee.service import EmployeeService

__all__ = [
    "CreateEmployeeInput",
    "Employee",
    "MockEmployeeClient",
    "EmployeeService",
]
