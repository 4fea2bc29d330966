"""Employee business logic on top of the mock backend client."""

from typing import List

from employee_gateway.app.core.logging import get_logger
from employee_gateway.app.exceptions import (
    EmployeeNotFoundError,
    EmployeeServiceError,
    GatewayException,
)
from employee_gateway.app.services.employee.client import MockEmployeeClient, mask_id
from employee_gateway.app.services.employee.models import CreateEmployeeInput, Employee

logger = get_logger(__name__)


class EmployeeService:
    """Employee operations exposed by ``/api/v1/employee``.

    Gateway exceptions raised by the client propagate unchanged; anything
    else is wrapped in ``EmployeeServiceError``.
    """

    def __init__(self, client: MockEmployeeClient):
        self.client = client

    async def get_all_employees(self) -> List[Employee]:
        try:
            return await self.client.get_all_employees()
        except GatewayException:
            raise
        except Exception as e:
            logger.exception("Failed to retrieve employees")
            raise EmployeeServiceError("Unable to fetch employees at this time") from e

    async def search_employees_by_name(self, search_string: str) -> List[Employee]:
        """Case-insensitive substring search on employee names."""
        needle = (search_string or "").strip().lower()
        if not needle:
            raise EmployeeServiceError("Search string cannot be empty")

        employees = await self.get_all_employees()
        matches = [e for e in employees if needle in e.name.lower()]
        logger.info(f"Search for '{needle}' returned {len(matches)} matching employees")
        return matches

    async def get_employee_by_id(self, employee_id: str) -> Employee:
        if not employee_id or not employee_id.strip():
            raise EmployeeServiceError("Employee ID cannot be empty")

        try:
            employee = await self.client.get_employee_by_id(employee_id)
        except GatewayException:
            raise
        except Exception as e:
            logger.exception(f"Unexpected error fetching employee {mask_id(employee_id)}")
            raise EmployeeServiceError("Failed to retrieve employee") from e

        if employee is None:
            logger.info(f"No employee found with ID {mask_id(employee_id)}")
            raise EmployeeNotFoundError(employee_id)
        return employee

    async def get_highest_salary(self) -> int:
        employees = await self.get_all_employees()
        return max((e.salary for e in employees), default=0)

    async def get_top_ten_highest_earning_employee_names(self) -> List[str]:
        employees = await self.get_all_employees()
        ranked = sorted(employees, key=lambda e: e.salary, reverse=True)
        return [e.name for e in ranked[:10]]

    async def create_employee(self, employee_input: CreateEmployeeInput) -> Employee:
        logger.info(f"Creating new employee: {employee_input.name}")
        try:
            return await self.client.create_employee(employee_input)
        except GatewayException:
            raise
        except Exception as e:
            logger.exception(f"Failed to create employee '{employee_input.name}'")
            raise EmployeeServiceError("Failed to create employee") from e

    async def delete_employee_by_id(self, employee_id: str) -> str:
        """Delete an employee and return the deleted employee's name."""
        employee = await self.get_employee_by_id(employee_id)

        try:
            deleted = await self.client.delete_employee(employee_id)
        except GatewayException:
            raise
        except Exception as e:
            logger.exception(f"Unexpected error deleting employee {mask_id(employee_id)}")
            raise EmployeeServiceError("Failed to delete employee") from e

        if not deleted:
            logger.error(f"Delete returned false for employee {mask_id(employee_id)}")
            raise EmployeeServiceError("Delete operation failed - please try again")

        logger.info(f"Deleted employee {employee.name} ({mask_id(employee_id)})")
        return employee.name
