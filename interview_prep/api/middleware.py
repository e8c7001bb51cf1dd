"""Middleware for exception handling and other cross-cutting concerns."""

import logging
import uuid
from collections.abc import Callable

from fastapi import Request, Response
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.status import HTTP_401_UNAUTHORIZED, HTTP_500_INTERNAL_SERVER_ERROR

from interview_prep.api.error_responses import create_error_response
from interview_prep.api.exceptions import APIException, AuthenticationException
from interview_prep.core.logging import log_event, set_request_id, span
from interview_prep.core.services.auth_cookie_config import AUTH_COOKIE_NAME
from interview_prep.core.storage import StorageError

logger = logging.getLogger(__name__)

PUBLIC_ROUTES = frozenset(
    {
        "/api/auth/signup",
        "/api/auth/login",
        "/api/auth/logout",
        "/openapi.json",
        "/",
        "/health",
    }
)
PUBLIC_PREFIXES = ("/docs", "/redoc")


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Middleware for adding request ID to all logs and responses."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
        request.state.request_id = request_id
        set_request_id(request_id)

        log_event(
            "request.started",
            component="middleware",
            operation="request_id",
            method=request.method,
            path=request.url.path,
            client_ip=request.client.host if request.client else "unknown",
        )

        try:
            response = await call_next(request)
            response.headers["X-Request-ID"] = request_id
            log_event(
                "request.completed",
                component="middleware",
                operation="request_id",
                status_code=response.status_code,
            )
            return response
        finally:
            set_request_id(None)


class ExceptionHandlingMiddleware(BaseHTTPMiddleware):
    """Last line of defence: turns anything a route raised into the JSON error body."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        try:
            return await call_next(request)
        except Exception as exc:
            return self._handle_exception(request, exc)

    def _handle_exception(self, request: Request, exc: Exception) -> JSONResponse:
        logger.exception(f"Exception in {request.method} {request.url.path}: {exc}")

        if isinstance(exc, APIException):
            return create_error_response(exc.status_code, exc.error, exc.detail, exc.details, exc.headers)
        if isinstance(exc, StorageError):
            return create_error_response(HTTP_500_INTERNAL_SERVER_ERROR, "StorageError", "Database operation failed")
        return create_error_response(
            HTTP_500_INTERNAL_SERVER_ERROR, "InternalServerError", "An unexpected error occurred"
        )


class AuthenticationMiddleware(BaseHTTPMiddleware):
    """Middleware for JWT token authentication.

    The token is taken from the ``Authorization: Bearer`` header, or failing
    that from the auth cookie. On success ``request.state.user_id`` and
    ``request.state.user_email`` are set for the route dependencies.
    """

    def __init__(self, app, jwt_service_factory: Callable):
        super().__init__(app)
        self.jwt_service_factory = jwt_service_factory

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        if self._should_skip_authentication(request):
            return await call_next(request)

        with span(
            "auth.authenticate_request",
            component="auth",
            operation="authenticate",
            path=request.url.path,
            method=request.method,
        ):
            try:
                token = self._extract_token(request)
                user_info = self.jwt_service_factory().verify_token(token)
            except AuthenticationException as exc:
                log_event(
                    "auth.authentication_failed",
                    level=logging.WARNING,
                    component="auth",
                    operation="authenticate",
                    error_msg=exc.detail,
                    path=request.url.path,
                )
                return create_error_response(
                    HTTP_401_UNAUTHORIZED, exc.error, exc.detail, headers={"WWW-Authenticate": "Bearer"}
                )

        request.state.user_id = user_info["user_id"]
        request.state.user_email = user_info["email"]
        return await call_next(request)

    def _should_skip_authentication(self, request: Request) -> bool:
        return request.method == "OPTIONS" or self._is_public_route(request.url.path)

    def _is_public_route(self, path: str) -> bool:
        return path in PUBLIC_ROUTES or path.startswith(PUBLIC_PREFIXES)

    def _extract_token(self, request: Request) -> str:
        """Extract JWT token from Authorization header or cookie."""
        authorization = request.headers.get("Authorization")
        if authorization:
            scheme, _, token = authorization.partition(" ")
            if scheme.lower() != "bearer" or not token.strip():
                raise AuthenticationException("Invalid Authorization header format")
            return token.strip()

        token = request.cookies.get(AUTH_COOKIE_NAME)
        if token:
            return token

        raise AuthenticationException("Not authorized, no token")
