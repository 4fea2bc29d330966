"""Custom exceptions for the employee gateway."""


class GatewayException(Exception):
    """Base class for gateway exceptions with HTTP status code.

    Subclasses define ``status_code`` and ``error`` so the exception handlers
    in ``main.py`` can render a consistent error body. ``public_message``,
    when set, replaces the internal message in responses.
    """
    status_code: int = 500
    error: str = "Internal server error"
    public_message: str | None = None

    def __init__(self, message: str = "Gateway error"):
        self.message = message
        super().__init__(message)


class EmployeeNotFoundError(GatewayException):
    """Raised when an employee id does not exist upstream.

    Maps to HTTP 404 Not Found.
    """
    status_code = 404
    error = "Employee not found"
    public_message = "The requested employee could not be found"

    def __init__(self, employee_id: str):
        self.employee_id = employee_id
        super().__init__(f"Employee not found with id: {employee_id}")


class EmployeeServiceError(GatewayException):
    """Raised for business-rule failures in the employee service.

    Maps to HTTP 500 Internal Server Error.
    """
    status_code = 500
    error = "Service error"
    public_message = "Unable to process your request at this time"


class ExternalApiError(GatewayException):
    """Raised when the mock employee backend is unreachable or misbehaves.

    Maps to HTTP 503 Service Unavailable.
    """
    status_code = 503
    error = "External service unavailable"
    public_message = (
        "Our employee service is temporarily unavailable. "
        "Please try again in a few moments."
    )


class UpstreamRateLimitError(GatewayException):
    """Raised when the mock employee backend keeps answering 429.

    Maps to HTTP 429 Too Many Requests. This is distinct from this service's
    own admission control, which never raises.
    """
    status_code = 429
    error = "Upstream rate limit exceeded"

    def __init__(
        self,
        message: str = "Employee service rate limit exceeded - please retry after a moment",
    ):
        super().__init__(message)
