"""Shared fixtures for the employee gateway tests."""

from datetime import timedelta
from typing import Callable, Optional

import pytest
from fastapi import FastAPI

from employee_gateway.app.api.employee import get_employee_service
from employee_gateway.app.core.config import RateLimitConfig, RateLimitSettings, Settings
from employee_gateway.app.exceptions import EmployeeNotFoundError
from employee_gateway.app.main import create_app
from employee_gateway.app.services.employee import Employee


class FakeClock:
    """Manually advanced monotonic clock for bucket refill tests."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class StubEmployeeService:
    """In-memory stand-in for EmployeeService used by API tests."""

    def __init__(self, employees: Optional[list[Employee]] = None):
        self.employees = employees or []

    async def get_all_employees(self) -> list[Employee]:
        return list(self.employees)

    async def get_employee_by_id(self, employee_id: str) -> Employee:
        for employee in self.employees:
            if employee.id == employee_id:
                return employee
        raise EmployeeNotFoundError(employee_id)


def make_rate_limit_settings(**overrides) -> RateLimitSettings:
    """Global capacity 20 plus a capacity 10 scope for /api/v1/employee/**."""
    values = {
        "enabled": True,
        "global": RateLimitConfig(
            capacity=20,
            refill_tokens=20,
            refill_period=timedelta(minutes=1),
            error_message="Global rate limit exceeded",
        ),
        "endpoints": {
            "/api/v1/employee/**": RateLimitConfig(
                capacity=10,
                refill_tokens=10,
                refill_period=timedelta(seconds=60),
                error_message="Employee API rate limit exceeded",
            ),
        },
        "management_enabled": True,
    }
    values.update(overrides)
    return RateLimitSettings(**values)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def rate_limit_settings() -> RateLimitSettings:
    return make_rate_limit_settings()


@pytest.fixture
def sample_employees() -> list[Employee]:
    return [
        Employee(id="a1b2c3d4", name="Ada Lovelace", salary=250000, age=36, title="Engineer"),
        Employee(id="e5f6g7h8", name="Grace Hopper", salary=310000, age=45, title="Admiral"),
    ]


@pytest.fixture
def make_app(clock, sample_employees) -> Callable[..., FastAPI]:
    """Build an app with explicit settings, a fake clock and a stub employee service."""

    def _make(rate_limit: Optional[RateLimitSettings] = None, **settings_overrides) -> FastAPI:
        config = Settings(
            _env_file=None,
            rate_limit=rate_limit or make_rate_limit_settings(),
            **settings_overrides,
        )
        app = create_app(config, clock=clock)
        stub = StubEmployeeService(sample_employees)
        app.dependency_overrides[get_employee_service] = lambda: stub
        return app

    return _make
