"""API-specific exceptions translated from the service layer."""

from fastapi import HTTPException
from starlette.status import (
    HTTP_400_BAD_REQUEST,
    HTTP_401_UNAUTHORIZED,
    HTTP_404_NOT_FOUND,
    HTTP_409_CONFLICT,
    HTTP_422_UNPROCESSABLE_CONTENT,
)

from interview_prep.api.error_responses import ErrorDetail


class APIException(HTTPException):
    """Base class; ``error`` is the machine-readable code in the response body."""

    error = "APIError"

    def __init__(
        self,
        status_code: int,
        message: str,
        details: list[ErrorDetail] | None = None,
        headers: dict[str, str] | None = None,
    ):
        super().__init__(status_code=status_code, detail=message, headers=headers)
        self.details = details


class SessionNotFoundAPIException(APIException):
    error = "SessionNotFound"

    def __init__(self, session_id: str):
        super().__init__(HTTP_404_NOT_FOUND, f"No session found with ID {session_id}")


class QuestionNotFoundAPIException(APIException):
    error = "QuestionNotFound"

    def __init__(self, question_id: str):
        super().__init__(HTTP_404_NOT_FOUND, f"No question found with ID {question_id}")


class ValidationException(APIException):
    error = "ValidationError"

    def __init__(self, message: str, field: str | None = None):
        details = [ErrorDetail(type="validation", message=message, field=field)] if field else None
        super().__init__(HTTP_422_UNPROCESSABLE_CONTENT, message, details=details)


class BadRequestException(APIException):
    error = "BadRequest"

    def __init__(self, message: str):
        super().__init__(HTTP_400_BAD_REQUEST, message)


class ConflictException(APIException):
    def __init__(self, error: str, message: str):
        super().__init__(HTTP_409_CONFLICT, message)
        self.error = error


class AuthenticationException(APIException):
    error = "AuthenticationError"

    def __init__(self, message: str = "Authentication required"):
        super().__init__(HTTP_401_UNAUTHORIZED, message, headers={"WWW-Authenticate": "Bearer"})
