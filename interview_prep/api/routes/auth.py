import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Request, Response
from starlette.status import HTTP_201_CREATED

from interview_prep.api.auth import JWTService, get_jwt_service
from interview_prep.api.dependencies import get_auth_cookie_config, get_current_user, get_user_service
from interview_prep.api.exceptions import (
    AuthenticationException,
    BadRequestException,
    ConflictException,
    ValidationException,
)
from interview_prep.api.schemas import (
    AuthResponse,
    CurrentUserResponse,
    LoginRequest,
    MessageResponse,
    SignupRequest,
    UserData,
)
from interview_prep.core.logging import audit_log, log_event
from interview_prep.core.models import User, UserCreate
from interview_prep.core.services import UserService
from interview_prep.core.services.auth_cookie_config import AUTH_COOKIE_NAME, AuthCookieConfig
from interview_prep.core.services.exceptions import (
    EmailAlreadyRegisteredError,
    InvalidCredentialsError,
    InvalidInputError,
)

router = APIRouter(prefix="/auth", tags=["authentication"])


def _client_ip(request: Request) -> str | None:
    return request.client.host if request.client else None


def _issue_token(
    user: User,
    response: Response,
    user_service: UserService,
    jwt_service: JWTService,
    cookie_config: AuthCookieConfig,
) -> AuthResponse:
    """Sign a token for the user, set it as the auth cookie and build the body."""
    token = jwt_service.create_access_token(user.id, user.email)
    response.set_cookie(key=AUTH_COOKIE_NAME, value=token, **cookie_config.get_cookie_settings())
    return AuthResponse(token=token, data=UserData(user=user_service.to_response(user)))


@router.post("/signup", response_model=AuthResponse, status_code=HTTP_201_CREATED)
def signup(
    payload: SignupRequest,
    request: Request,
    response: Response,
    user_service: Annotated[UserService, Depends(get_user_service)],
    jwt_service: Annotated[JWTService, Depends(get_jwt_service)],
    cookie_config: Annotated[AuthCookieConfig, Depends(get_auth_cookie_config)],
) -> AuthResponse:
    """Register with name, email and password."""
    try:
        user = user_service.register(
            UserCreate(full_name=payload.full_name, email=payload.email, password=payload.password)
        )
    except InvalidInputError as e:
        raise ValidationException(str(e), e.field) from e
    except EmailAlreadyRegisteredError as e:
        audit_log("signup_duplicate_email", user_id=None, client_ip=_client_ip(request))
        raise ConflictException("EmailAlreadyRegistered", str(e)) from e

    audit_log("signup", user_id=user.id, client_ip=_client_ip(request))
    return _issue_token(user, response, user_service, jwt_service, cookie_config)


@router.post("/login", response_model=AuthResponse)
def login(
    payload: LoginRequest,
    request: Request,
    response: Response,
    user_service: Annotated[UserService, Depends(get_user_service)],
    jwt_service: Annotated[JWTService, Depends(get_jwt_service)],
    cookie_config: Annotated[AuthCookieConfig, Depends(get_auth_cookie_config)],
) -> AuthResponse:
    if not payload.email or not payload.password:
        raise BadRequestException("Please provide email and password")

    try:
        user = user_service.authenticate(payload.email, payload.password)
    except InvalidCredentialsError as e:
        audit_log("login_failed", user_id=None, client_ip=_client_ip(request))
        raise AuthenticationException(str(e)) from e

    log_event("auth.login", component="auth", operation="login", user_id=user.id)
    return _issue_token(user, response, user_service, jwt_service, cookie_config)


@router.get("/logout", response_model=MessageResponse)
def logout(
    response: Response,
    cookie_config: Annotated[AuthCookieConfig, Depends(get_auth_cookie_config)],
) -> MessageResponse:
    """Clear the auth cookie. Header tokens stay valid until they expire."""
    response.delete_cookie(key=AUTH_COOKIE_NAME, **cookie_config.get_clear_settings())
    log_event("auth.logout", level=logging.DEBUG, component="auth", operation="logout")
    return MessageResponse(message="Logged out successfully")


@router.get("/me", response_model=CurrentUserResponse)
def get_me(
    user: Annotated[User, Depends(get_current_user)],
    user_service: Annotated[UserService, Depends(get_user_service)],
) -> CurrentUserResponse:
    return CurrentUserResponse(data=UserData(user=user_service.to_response(user)))
