from datetime import UTC, datetime, timedelta
from functools import lru_cache
from typing import Any

from jose import JWTError, jwt

from interview_prep.api.exceptions import AuthenticationException
from interview_prep.core.services.token_config import DEFAULT_TOKEN_EXPIRE_DAYS, TokenConfig


class JWTService:
    def __init__(self, secret_key: str, algorithm: str = "HS256", expire_days: int = DEFAULT_TOKEN_EXPIRE_DAYS):
        self.secret_key = secret_key
        self.algorithm = algorithm
        self.expire_days = expire_days

    def create_access_token(self, user_id: str, email: str) -> str:
        now = datetime.now(UTC)
        to_encode = {"sub": user_id, "email": email, "iat": now, "exp": now + timedelta(days=self.expire_days)}
        return jwt.encode(to_encode, self.secret_key, algorithm=self.algorithm)

    def verify_token(self, token: str) -> dict[str, Any]:
        try:
            payload = jwt.decode(token, self.secret_key, algorithms=[self.algorithm])
        except JWTError:
            raise AuthenticationException("Invalid or expired token")

        user_id = payload.get("sub")
        email = payload.get("email")
        if user_id is None or email is None:
            raise AuthenticationException("Invalid token: missing user information")

        return {"user_id": user_id, "email": email}


@lru_cache
def get_token_config() -> TokenConfig:
    return TokenConfig()


@lru_cache
def get_jwt_service() -> JWTService:
    config = get_token_config()
    return JWTService(config.secret_key, config.algorithm, config.expire_days)
