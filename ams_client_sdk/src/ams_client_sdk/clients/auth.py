from __future__ import annotations

from ..models import LoginResponse, UserProfile
from .base import BaseClient


class AuthClient(BaseClient):
    module = "auth"

    def login(self, email: str, password: str) -> LoginResponse:
        payload = {"email": email, "password": password}
        data = self._request("POST", "/api/Auth/login", json_body=payload, module=self.module, operation="login")
        return LoginResponse.model_validate(data)

    def refresh(self) -> LoginResponse:
        # refresh token travels as an HttpOnly cookie on the shared requests session
        data = self._request("POST", "/api/Auth/refresh", module=self.module, operation="refresh")
        return LoginResponse.model_validate(data)

    def me(self) -> UserProfile:
        data = self._request("GET", "/api/Auth/me", module=self.module, operation="me", use_get_cache=False)
        return UserProfile.model_validate(data)

    def logout(self) -> None:
        self._request("POST", "/api/Auth/logout", module=self.module, operation="logout")
