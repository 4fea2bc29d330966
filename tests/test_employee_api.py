"""Tests for the employee REST endpoints."""

from unittest.mock import AsyncMock

import pytest
from fastapi.testclient import TestClient

from employee_gateway.app.api.employee import get_employee_service
from employee_gateway.app.exceptions import (
    EmployeeNotFoundError,
    EmployeeServiceError,
    ExternalApiError,
    UpstreamRateLimitError,
)
from employee_gateway.app.services.employee import Employee


@pytest.fixture
def service():
    return AsyncMock()


@pytest.fixture
def client(make_app, service) -> TestClient:
    app = make_app()
    app.dependency_overrides[get_employee_service] = lambda: service
    return TestClient(app)


def ada() -> Employee:
    return Employee(id="a1b2c3d4", name="Ada Lovelace", salary=250000, age=36, title="Engineer")


class TestEmployeeRoutes:
    """Successful responses."""

    def test_list_uses_backend_field_names(self, client, service):
        service.get_all_employees.return_value = [ada()]

        response = client.get("/api/v1/employee")

        assert response.status_code == 200
        assert response.json() == [
            {
                "id": "a1b2c3d4",
                "employee_name": "Ada Lovelace",
                "employee_salary": 250000,
                "employee_age": 36,
                "employee_title": "Engineer",
                "employee_email": None,
            }
        ]

    def test_search(self, client, service):
        service.search_employees_by_name.return_value = [ada()]

        response = client.get("/api/v1/employee/search/ada")

        assert response.status_code == 200
        service.search_employees_by_name.assert_awaited_once_with("ada")

    def test_highest_salary(self, client, service):
        service.get_highest_salary.return_value = 310000

        response = client.get("/api/v1/employee/highestSalary")

        assert response.status_code == 200
        assert response.json() == 310000

    def test_top_ten_names(self, client, service):
        service.get_top_ten_highest_earning_employee_names.return_value = ["Grace", "Ada"]

        response = client.get("/api/v1/employee/topTenHighestEarningEmployeeNames")

        assert response.json() == ["Grace", "Ada"]

    def test_get_by_id(self, client, service):
        service.get_employee_by_id.return_value = ada()

        response = client.get("/api/v1/employee/a1b2c3d4")

        assert response.status_code == 200
        assert response.json()["employee_name"] == "Ada Lovelace"

    def test_create_returns_201(self, client, service):
        service.create_employee.return_value = ada()

        response = client.post(
            "/api/v1/employee",
            json={"name": "Ada Lovelace", "salary": 250000, "age": 36, "title": "Engineer"},
        )

        assert response.status_code == 201
        assert response.json()["id"] == "a1b2c3d4"

    def test_delete_returns_name(self, client, service):
        service.delete_employee_by_id.return_value = "Ada Lovelace"

        response = client.delete("/api/v1/employee/a1b2c3d4")

        assert response.status_code == 200
        assert response.json() == "Ada Lovelace"


class TestErrorResponses:
    """Exception to status mapping."""

    @pytest.mark.parametrize(
        ("exc", "status", "error"),
        [
            (EmployeeNotFoundError("x"), 404, "Employee not found"),
            (EmployeeServiceError("bad"), 500, "Service error"),
            (ExternalApiError("down"), 503, "External service unavailable"),
            (UpstreamRateLimitError(), 429, "Upstream rate limit exceeded"),
        ],
    )
    def test_gateway_exceptions_are_mapped(self, client, service, exc, status, error):
        service.get_employee_by_id.side_effect = exc

        response = client.get("/api/v1/employee/x")

        assert response.status_code == status
        body = response.json()
        assert body["error"] == error
        assert body["status"] == status
        assert "timestamp" in body

    def test_internal_message_is_hidden(self, client, service):
        service.get_employee_by_id.side_effect = ExternalApiError("HTTP error from employee service: 502")

        body = client.get("/api/v1/employee/x").json()

        assert "502" not in body["message"]
        assert "detail" not in body

    def test_debug_exposes_internal_message(self, make_app, service):
        app = make_app(debug=True)
        app.dependency_overrides[get_employee_service] = lambda: service
        service.get_employee_by_id.side_effect = ExternalApiError("HTTP error from employee service: 502")

        body = TestClient(app).get("/api/v1/employee/x").json()

        assert body["detail"] == "HTTP error from employee service: 502"

    def test_invalid_body_returns_400_with_field_errors(self, client, service):
        response = client.post(
            "/api/v1/employee",
            json={"name": " ", "salary": -5, "age": 12, "title": "Engineer"},
        )

        assert response.status_code == 400
        body = response.json()
        assert body["error"] == "Validation failed"
        assert set(body["field_errors"]) == {"name", "salary", "age"}
        service.create_employee.assert_not_called()

    def test_invalid_email_is_rejected(self, client):
        response = client.post(
            "/api/v1/employee",
            json={"name": "Ada", "salary": 1, "age": 30, "title": "Engineer", "email": "nope"},
        )

        assert response.status_code == 400
        assert "email" in response.json()["field_errors"]


def test_health(make_app):
    response = TestClient(make_app()).get("/health")

    assert response.status_code == 200
    assert response.json() == {
        "status": "ok",
        "rate_limit": {"enabled": True, "active_buckets": 1},
    }
