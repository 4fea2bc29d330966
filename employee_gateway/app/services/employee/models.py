"""Employee data models.

``Employee`` is what this API returns; its JSON keys follow the mock
backend's ``employee_*`` naming. ``MockEmployeeInput`` and
``DeleteMockEmployeeInput`` are the backend's request bodies.
"""

from typing import Generic, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field, field_validator

T = TypeVar("T")


class Employee(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: Optional[str] = None
    name: str = Field(..., alias="employee_name")
    salary: int = Field(..., alias="employee_salary")
    age: int = Field(..., alias="employee_age")
    title: str = Field(..., alias="employee_title")
    email: Optional[str] = Field(default=None, alias="employee_email")

    @field_validator("id", mode="before")
    @classmethod
    def coerce_id(cls, v):
        # The backend issues UUIDs; keep them as plain strings
        return None if v is None else str(v)


class CreateEmployeeInput(BaseModel):
    """Body of ``POST /api/v1/employee``."""

    name: str = Field(..., min_length=1, max_length=200)
    salary: int = Field(..., gt=0)
    age: int = Field(..., ge=16, le=75)
    title: str = Field(..., min_length=1, max_length=200)
    email: Optional[str] = Field(default=None, max_length=320)

    @field_validator("name", "title")
    @classmethod
    def not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("must not be blank")
        return v

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        v = v.strip().lower()
        # Lightweight validation without adding extra dependencies.
        local, _, domain = v.partition("@")
        if not local or not domain or "." not in domain:
            raise ValueError("Employee email must be valid")
        return v


class MockEmployeeInput(BaseModel):
    name: str
    salary: int
    age: int
    title: str


class DeleteMockEmployeeInput(BaseModel):
    name: str


class MockResponse(BaseModel, Generic[T]):
    """Envelope the mock backend wraps around every payload."""

    data: Optional[T] = None
    status: Optional[str] = None
