"""Error response body shared by every endpoint.

{
    "error": "Failed to fetch bounty statistics",
    "details": "Database connection failed"    // omitted when absent
}

Success bodies are endpoint-specific (see each context's schemas.py).
"""

from typing import Any

from pydantic import BaseModel


class ErrorResponse(BaseModel):
    error: str
    details: str | None = None


def error_response(message: str, details: str | None = None) -> ErrorResponse:
    return ErrorResponse(error=message, details=details)


def error_content(message: str, details: str | None = None) -> dict[str, Any]:
    """JSON-ready error body; drops `details` when there is none."""
    return error_response(message, details).model_dump(exclude_none=True)
