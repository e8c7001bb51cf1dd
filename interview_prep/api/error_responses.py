from typing import Any

from fastapi.responses import JSONResponse
from pydantic import BaseModel


class ErrorDetail(BaseModel):
    """Detailed error information."""

    type: str
    message: str
    field: str | None = None


class StandardErrorResponse(BaseModel):
    """Standardized error response format."""

    status: str
    error: str
    message: str
    details: list[ErrorDetail] | None = None


def error_status(status_code: int) -> str:
    """``fail`` for client errors, ``error`` for server errors."""
    return "error" if status_code >= 500 else "fail"


def create_error_response(
    status_code: int,
    error: str,
    message: str,
    details: list[ErrorDetail] | None = None,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    """Create a consistent error response."""
    body = StandardErrorResponse(
        status=error_status(status_code),
        error=error,
        message=message,
        details=details,
    )
    return JSONResponse(status_code=status_code, content=body.model_dump(), headers=headers)


def details_from_validation_errors(errors: list[dict[str, Any]]) -> list[ErrorDetail]:
    """Flatten pydantic/FastAPI error dicts into ``ErrorDetail`` entries."""
    details = []
    for error in errors:
        location = [str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path")]
        details.append(
            ErrorDetail(
                type=error.get("type", "validation"),
                message=error.get("msg", "Invalid value"),
                field=".".join(location) or None,
            )
        )
    return details
