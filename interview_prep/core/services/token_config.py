"""Token lifetime configuration service."""

import os

DEFAULT_TOKEN_EXPIRE_DAYS = 90
MIN_TOKEN_EXPIRE_DAYS = 1
MAX_TOKEN_EXPIRE_DAYS = 365

MIN_SECRET_KEY_LENGTH = 32


class TokenConfig:
    """Reads JWT settings from the environment."""

    def __init__(self):
        self.secret_key = self._get_secret_key()
        self.algorithm = "HS256"
        self.expire_days = self._get_expire_days()

    def get_max_age_seconds(self) -> int:
        """Token lifetime in seconds, used as the auth cookie max age."""
        return self.expire_days * 24 * 60 * 60

    def _get_secret_key(self) -> str:
        secret_key = os.getenv("JWT_SECRET_KEY")
        if not secret_key or len(secret_key) < MIN_SECRET_KEY_LENGTH:
            raise ValueError(f"JWT_SECRET_KEY must be set and at least {MIN_SECRET_KEY_LENGTH} characters long")
        return secret_key

    def _get_expire_days(self) -> int:
        try:
            days = int(os.getenv("JWT_EXPIRES_DAYS", str(DEFAULT_TOKEN_EXPIRE_DAYS)))
        except (ValueError, TypeError):
            return DEFAULT_TOKEN_EXPIRE_DAYS

        return max(MIN_TOKEN_EXPIRE_DAYS, min(days, MAX_TOKEN_EXPIRE_DAYS))
