"""Tests for the mock employee backend client."""

import json

import httpx
import pytest

from employee_gateway.app.core.retry import RetryPolicy
from employee_gateway.app.exceptions import ExternalApiError, UpstreamRateLimitError
from employee_gateway.app.services.employee import CreateEmployeeInput, MockEmployeeClient
from employee_gateway.app.services.employee.client import mask_id

BASE_URL = "http://mock-server:8112"
EMPLOYEES_URL = f"{BASE_URL}/api/v1/employee"

ADA = {
    "id": "a1b2c3d4-0000-0000-0000-000000000001",
    "employee_name": "Ada Lovelace",
    "employee_salary": 250000,
    "employee_age": 36,
    "employee_title": "Engineer",
    "employee_email": "ada@company.com",
}


def envelope(data):
    return {"data": data, "status": "Successfully processed request."}


@pytest.fixture
def client() -> MockEmployeeClient:
    return MockEmployeeClient(
        base_url=BASE_URL + "/",
        retry_policy=RetryPolicy(max_retries=2, base_delay=0.0),
    )


def test_mask_id():
    assert mask_id("a1b2c3d4") == "a1b2****"
    assert mask_id("abc") == "****"


class TestGetEmployees:
    """Listing and lookup."""

    @pytest.mark.asyncio
    async def test_get_all_employees(self, client, respx_mock):
        respx_mock.get(EMPLOYEES_URL).mock(return_value=httpx.Response(200, json=envelope([ADA])))

        employees = await client.get_all_employees()

        assert len(employees) == 1
        assert employees[0].id == ADA["id"]
        assert employees[0].name == "Ada Lovelace"
        assert employees[0].salary == 250000

    @pytest.mark.asyncio
    async def test_get_all_employees_rejects_non_list(self, client, respx_mock):
        respx_mock.get(EMPLOYEES_URL).mock(return_value=httpx.Response(200, json=envelope("nope")))

        with pytest.raises(ExternalApiError):
            await client.get_all_employees()

    @pytest.mark.asyncio
    async def test_get_employee_by_id(self, client, respx_mock):
        respx_mock.get(f"{EMPLOYEES_URL}/{ADA['id']}").mock(
            return_value=httpx.Response(200, json=envelope(ADA))
        )

        employee = await client.get_employee_by_id(ADA["id"])

        assert employee is not None
        assert employee.email == "ada@company.com"

    @pytest.mark.asyncio
    async def test_missing_employee_returns_none(self, client, respx_mock):
        route = respx_mock.get(f"{EMPLOYEES_URL}/missing").mock(return_value=httpx.Response(404))

        assert await client.get_employee_by_id("missing") is None
        # 404 is not retried
        assert route.call_count == 1

    @pytest.mark.asyncio
    async def test_null_data_returns_none(self, client, respx_mock):
        respx_mock.get(f"{EMPLOYEES_URL}/gone").mock(
            return_value=httpx.Response(200, json=envelope(None))
        )

        assert await client.get_employee_by_id("gone") is None


class TestUpstreamFailures:
    """Retries and error translation."""

    @pytest.mark.asyncio
    async def test_throttling_is_retried(self, client, respx_mock):
        route = respx_mock.get(EMPLOYEES_URL).mock(
            side_effect=[
                httpx.Response(429),
                httpx.Response(200, json=envelope([ADA])),
            ]
        )

        employees = await client.get_all_employees()

        assert len(employees) == 1
        assert route.call_count == 2

    @pytest.mark.asyncio
    async def test_persistent_throttling_raises_upstream_rate_limit(self, client, respx_mock):
        route = respx_mock.get(EMPLOYEES_URL).mock(return_value=httpx.Response(429))

        with pytest.raises(UpstreamRateLimitError):
            await client.get_all_employees()
        assert route.call_count == 3

    @pytest.mark.asyncio
    async def test_server_error_raises_external_api_error(self, client, respx_mock):
        respx_mock.get(EMPLOYEES_URL).mock(return_value=httpx.Response(503))

        with pytest.raises(ExternalApiError) as exc_info:
            await client.get_all_employees()
        assert "503" in exc_info.value.message

    @pytest.mark.asyncio
    async def test_connection_error_raises_external_api_error(self, client, respx_mock):
        respx_mock.get(EMPLOYEES_URL).mock(side_effect=httpx.ConnectError("refused"))

        with pytest.raises(ExternalApiError):
            await client.get_all_employees()

    @pytest.mark.asyncio
    async def test_invalid_json_raises_external_api_error(self, client, respx_mock):
        respx_mock.get(EMPLOYEES_URL).mock(return_value=httpx.Response(200, text="<html>"))

        with pytest.raises(ExternalApiError):
            await client.get_all_employees()


class TestMutations:
    """Create and delete."""

    @pytest.mark.asyncio
    async def test_create_employee_sends_backend_payload(self, client, respx_mock):
        route = respx_mock.post(EMPLOYEES_URL).mock(
            return_value=httpx.Response(200, json=envelope(ADA))
        )
        employee_input = CreateEmployeeInput(
            name="Ada Lovelace", salary=250000, age=36, title="Engineer"
        )

        employee = await client.create_employee(employee_input)

        assert employee.id == ADA["id"]
        sent = json.loads(route.calls.last.request.content)
        assert sent == {"name": "Ada Lovelace", "salary": 250000, "age": 36, "title": "Engineer"}

    @pytest.mark.asyncio
    async def test_create_employee_without_data_fails(self, client, respx_mock):
        respx_mock.post(EMPLOYEES_URL).mock(return_value=httpx.Response(200, json=envelope(None)))
        employee_input = CreateEmployeeInput(name="Ada", salary=1, age=30, title="Engineer")

        with pytest.raises(ExternalApiError):
            await client.create_employee(employee_input)

    @pytest.mark.asyncio
    async def test_delete_employee_deletes_by_name(self, client, respx_mock):
        respx_mock.get(f"{EMPLOYEES_URL}/{ADA['id']}").mock(
            return_value=httpx.Response(200, json=envelope(ADA))
        )
        route = respx_mock.delete(EMPLOYEES_URL).mock(
            return_value=httpx.Response(200, json=envelope(True))
        )

        assert await client.delete_employee(ADA["id"]) is True
        assert json.loads(route.calls.last.request.content) == {"name": "Ada Lovelace"}

    @pytest.mark.asyncio
    @pytest.mark.respx(assert_all_called=False)
    async def test_delete_missing_employee_returns_false(self, client, respx_mock):
        respx_mock.get(f"{EMPLOYEES_URL}/missing").mock(return_value=httpx.Response(404))
        route = respx_mock.delete(EMPLOYEES_URL)

        assert await client.delete_employee("missing") is False
        assert route.call_count == 0

    @pytest.mark.asyncio
    async def test_shared_http_client_is_reused(self, respx_mock):
        respx_mock.get(EMPLOYEES_URL).mock(return_value=httpx.Response(200, json=envelope([])))

        async with httpx.AsyncClient() as http_client:
            client = MockEmployeeClient(base_url=BASE_URL, http_client=http_client)
            assert await client.get_all_employees() == []
            assert not http_client.is_closed
