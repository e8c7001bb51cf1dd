import logging
import os

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from starlette.status import HTTP_422_UNPROCESSABLE_CONTENT, HTTP_500_INTERNAL_SERVER_ERROR

from interview_prep.api.auth import get_jwt_service
from interview_prep.api.error_responses import create_error_response, details_from_validation_errors
from interview_prep.api.exceptions import APIException
from interview_prep.api.middleware import (
    AuthenticationMiddleware,
    ExceptionHandlingMiddleware,
    RequestIDMiddleware,
)
from interview_prep.api.routes import auth, sessions
from interview_prep.core.logging import TRUTHY, init_logging, log_event
from interview_prep.core.storage import StorageError

app = FastAPI(
    title="Interview Prep API",
    description="HTTP API for AI-assisted interview preparation sessions",
    version="0.1.0",
)

init_logging(
    level=os.getenv("INTERVIEW_PREP_LOG_LEVEL", "INFO"),
    fmt=os.getenv("INTERVIEW_PREP_LOG_FORMAT", "json"),
    file_path=os.getenv("INTERVIEW_PREP_LOG_FILE"),
    mask=os.getenv("INTERVIEW_PREP_LOG_MASK", "false").lower() in TRUTHY,
    use_stderr=True,
)

allowed_origins = os.getenv("ALLOWED_ORIGINS", "http://localhost:3000,http://127.0.0.1:3000").split(",")

app.add_middleware(
    CORSMiddleware,
    allow_origins=[origin.strip() for origin in allowed_origins if origin.strip()],
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization", "X-Request-ID"],
    max_age=86400,
)

# Starlette runs the last added middleware first
app.add_middleware(AuthenticationMiddleware, jwt_service_factory=get_jwt_service)
app.add_middleware(ExceptionHandlingMiddleware)
app.add_middleware(RequestIDMiddleware)

app.include_router(auth.router, prefix="/api")
app.include_router(sessions.router, prefix="/api")


@app.exception_handler(APIException)
async def api_exception_handler(request: Request, exc: APIException):
    return create_error_response(exc.status_code, exc.error, exc.detail, exc.details, exc.headers)


@app.exception_handler(RequestValidationError)
async def request_validation_exception_handler(request: Request, exc: RequestValidationError):
    return create_error_response(
        HTTP_422_UNPROCESSABLE_CONTENT,
        "ValidationError",
        "Request validation failed",
        details_from_validation_errors(exc.errors()),
    )


@app.exception_handler(StorageError)
async def storage_exception_handler(request: Request, exc: StorageError):
    log_event(
        "storage.error",
        component="api",
        operation=f"{request.method} {request.url.path}",
        error_type=type(exc).__name__,
        error_msg=str(exc),
        level=logging.ERROR,
    )
    return create_error_response(HTTP_500_INTERNAL_SERVER_ERROR, "StorageError", "Database operation failed")


@app.get("/")
async def root():
    return {"message": "Interview Prep API", "version": "0.1.0"}


@app.get("/health")
async def health_check():
    return {"status": "healthy"}
