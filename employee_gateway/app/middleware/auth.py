import hmac

from fastapi import HTTPException, Request


def get_bearer_token(request: Request) -> str | None:
    """Extract Bearer token from Authorization header.

    Args:
        request: The incoming request

    Returns:
        The token string if present, None otherwise
    """
    auth = request.headers.get("Authorization", "")
    if not auth.startswith("Bearer "):
        return None
    return auth.replace("Bearer ", "", 1).strip()


def require_admin(request: Request) -> str:
    """Validate the admin token for the rate limit management routes.

    The expected token comes from the application's settings
    (``ADMIN_TOKEN``). When it is empty the routes are left open.

    Raises:
        HTTPException: 401 if a token is configured and the request's is
            missing or wrong
    """
    expected_token = request.app.state.settings.admin_token
    if not expected_token:
        return "anonymous"

    # Always compare so a missing token takes the same path as a wrong one
    token = get_bearer_token(request) or ""

    if not hmac.compare_digest(token, expected_token):
        raise HTTPException(status_code=401, detail="Invalid or missing admin token")

    return "admin"
