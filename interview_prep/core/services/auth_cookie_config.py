"""Auth cookie security configuration service."""

import os
from typing import Any

AUTH_COOKIE_NAME = "jwt"


class AuthCookieConfig:
    """Settings for the HTTP-only cookie that carries the access token."""

    def __init__(self, max_age: int):
        self.secure_cookies = self._is_production()
        self.same_site_policy = self._get_same_site_policy()
        self.max_age = max_age
        self.domain = self._get_domain()

    def get_cookie_settings(self) -> dict[str, Any]:
        return {
            "secure": self.secure_cookies,
            "httponly": True,
            "samesite": self.same_site_policy,
            "max_age": self.max_age,
            "domain": self.domain,
            "path": "/",
        }

    def get_clear_settings(self) -> dict[str, Any]:
        """Settings for deleting the cookie; must match the ones it was set with."""
        return {
            "secure": self.secure_cookies,
            "httponly": True,
            "samesite": self.same_site_policy,
            "domain": self.domain,
            "path": "/",
        }

    def _is_production(self) -> bool:
        env = os.getenv("ENVIRONMENT", "development").lower()
        return env in ["production", "prod", "live"]

    def _get_same_site_policy(self) -> str:
        policy = self._sanitize_env_value(os.getenv("COOKIE_SAMESITE", "lax"))
        if policy and policy.lower() in ["strict", "lax", "none"]:
            policy = policy.lower()
            # Browsers drop SameSite=None cookies that are not Secure
            if policy == "none" and not self.secure_cookies:
                return "lax"
            return policy
        return "lax"

    def _get_domain(self) -> str | None:
        return self._sanitize_env_value(os.getenv("COOKIE_DOMAIN", ""))

    def _sanitize_env_value(self, value: str | None) -> str | None:
        """Drop null bytes and CR/LF so the value cannot inject header content."""
        if not value:
            return None
        sanitized = value.replace("\x00", "").replace("\r", "").replace("\n", "").strip()
        return sanitized or None
