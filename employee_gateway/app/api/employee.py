"""Employee REST endpoints."""

from typing import Annotated, List

from fastapi import APIRouter, Depends, Request, status

from employee_gateway.app.core.logging import get_logger
from employee_gateway.app.services.employee import (
    CreateEmployeeInput,
    Employee,
    EmployeeService,
)
from employee_gateway.app.services.employee.client import mask_id

logger = get_logger(__name__)
router = APIRouter(prefix="/api/v1/employee", tags=["employee"])


def get_employee_service(request: Request) -> EmployeeService:
    return request.app.state.employee_service


ServiceDep = Annotated[EmployeeService, Depends(get_employee_service)]


@router.get("", response_model=List[Employee])
async def get_all_employees(service: ServiceDep) -> List[Employee]:
    employees = await service.get_all_employees()
    logger.info(f"Returned {len(employees)} employees")
    return employees


@router.get("/search/{search_string}", response_model=List[Employee])
async def search_employees(search_string: str, service: ServiceDep) -> List[Employee]:
    """Search employees whose name contains ``search_string`` (case-insensitive)."""
    return await service.search_employees_by_name(search_string)


@router.get("/highestSalary")
async def get_highest_salary(service: ServiceDep) -> int:
    return await service.get_highest_salary()


@router.get("/topTenHighestEarningEmployeeNames")
async def get_top_ten_highest_earning_employee_names(service: ServiceDep) -> List[str]:
    return await service.get_top_ten_highest_earning_employee_names()


@router.get("/{employee_id}", response_model=Employee)
async def get_employee_by_id(employee_id: str, service: ServiceDep) -> Employee:
    return await service.get_employee_by_id(employee_id)


@router.post("", response_model=Employee, status_code=status.HTTP_201_CREATED)
async def create_employee(employee_input: CreateEmployeeInput, service: ServiceDep) -> Employee:
    employee = await service.create_employee(employee_input)
    logger.info(f"Created employee with ID {employee.id}")
    return employee


@router.delete("/{employee_id}")
async def delete_employee_by_id(employee_id: str, service: ServiceDep) -> str:
    """Delete an employee; responds with the deleted employee's name."""
    logger.info(f"Delete request received for employee {mask_id(employee_id)}")
    return await service.delete_employee_by_id(employee_id)
