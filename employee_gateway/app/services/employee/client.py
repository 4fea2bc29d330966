"""HTTP client for the mock employee backend.

The backend wraps every payload in ``{"data": ..., "status": ...}``, deletes
by name rather than id, and throttles at random with HTTP 429. Transient
failures are retried with backoff; anything left over is translated into
the gateway's exception types.
"""

import time
from contextlib import asynccontextmanager
from typing import Any, List, Optional

import httpx

from employee_gateway.app.core.logging import get_logger
from employee_gateway.app.core.retry import RetryPolicy, with_retry
from employee_gateway.app.exceptions import ExternalApiError, UpstreamRateLimitError
from employee_gateway.app.services.employee.models import (
    CreateEmployeeInput,
    DeleteMockEmployeeInput,
    Employee,
    MockEmployeeInput,
    MockResponse,
)

logger = get_logger(__name__)

EMPLOYEES_ENDPOINT = "/api/v1/employee"


def mask_id(employee_id: str) -> str:
    """Show only the first four characters of an id in logs."""
    return employee_id[:4] + "****" if len(employee_id) > 4 else "****"


class MockEmployeeClient:
    """Async client for the mock employee API.

    If http_client is provided, it is used for all requests (connection reuse).
    If not, a new client is created per request.
    """

    def __init__(
        self,
        base_url: str,
        http_client: Optional[httpx.AsyncClient] = None,
        retry_policy: Optional[RetryPolicy] = None,
        timeout: float = 30.0,
    ):
        self.base_url = base_url.rstrip("/")
        self._http_client = http_client
        self.retry_policy = retry_policy or RetryPolicy()
        self.timeout = timeout

    @asynccontextmanager
    async def _client_context(self):
        if self._http_client is not None:
            yield self._http_client
            return
        client = httpx.AsyncClient(timeout=self.timeout)
        try:
            yield client
        finally:
            await client.aclose()

    async def _send(self, method: str, json: Any = None, suffix: str = "") -> httpx.Response:
        url = f"{self.base_url}{EMPLOYEES_ENDPOINT}{suffix}"
        async with self._client_context() as client:
            resp = await client.request(method, url, json=json)
            resp.raise_for_status()
            return resp

    async def _call(self, action: str, method: str, json: Any = None, suffix: str = "") -> Any:
        """Send a request with retries and return the envelope's ``data``.

        Raises:
            UpstreamRateLimitError: backend still answered 429 after retries
            ExternalApiError: any other HTTP or transport failure
        """
        started = time.perf_counter()
        try:
            resp = await with_retry(self.retry_policy)(self._send)(method, json, suffix)
        except httpx.HTTPStatusError as e:
            duration_ms = (time.perf_counter() - started) * 1000
            status = e.response.status_code
            if status == 429:
                logger.warning(f"Mock server rate limited {action} after {duration_ms:.0f}ms")
                raise UpstreamRateLimitError() from e
            logger.error(f"HTTP error {status} from mock server while trying to {action}")
            raise ExternalApiError(f"HTTP error from employee service: {status}") from e
        except httpx.HTTPError as e:
            logger.error(f"Unable to reach mock server to {action}: {e}")
            raise ExternalApiError(f"Unable to {action}") from e

        try:
            body = resp.json()
        except ValueError as e:
            raise ExternalApiError("Mock server returned unexpected response format") from e
        if not isinstance(body, dict):
            raise ExternalApiError("Mock server returned unexpected response format")
        return body.get("data")

    async def get_all_employees(self) -> List[Employee]:
        data = await self._call("fetch employees", "GET")
        if not isinstance(data, list):
            raise ExternalApiError("Mock server returned unexpected response format")
        employees = MockResponse[List[Employee]](data=data).data or []
        logger.info(f"Retrieved {len(employees)} employees from mock server")
        return employees

    async def get_employee_by_id(self, employee_id: str) -> Optional[Employee]:
        """Look up one employee; returns None when the backend has no such id."""
        try:
            data = await self._call(
                f"look up employee {mask_id(employee_id)}", "GET", suffix=f"/{employee_id}"
            )
        except ExternalApiError as e:
            cause = e.__cause__
            if isinstance(cause, httpx.HTTPStatusError) and cause.response.status_code == 404:
                logger.debug(f"Employee {mask_id(employee_id)} not found in mock server")
                return None
            raise
        if data is None:
            return None
        return Employee.model_validate(data)

    async def create_employee(self, employee_input: CreateEmployeeInput) -> Employee:
        payload = MockEmployeeInput(
            name=employee_input.name,
            salary=employee_input.salary,
            age=employee_input.age,
            title=employee_input.title,
        )
        data = await self._call(
            f"create employee '{employee_input.name}'", "POST", json=payload.model_dump()
        )
        if data is None:
            raise ExternalApiError("Employee creation failed - server returned no data")
        employee = Employee.model_validate(data)
        logger.info(f"Created employee '{employee.name}' with ID {employee.id} in mock server")
        return employee

    async def delete_employee(self, employee_id: str) -> bool:
        """Delete by id. The backend deletes by name, so the name is looked up first."""
        employee = await self.get_employee_by_id(employee_id)
        if employee is None:
            logger.warning(f"Cannot delete employee {mask_id(employee_id)} - not found")
            return False

        payload = DeleteMockEmployeeInput(name=employee.name)
        data = await self._call(
            f"delete employee {mask_id(employee_id)}", "DELETE", json=payload.model_dump()
        )
        return data is True
