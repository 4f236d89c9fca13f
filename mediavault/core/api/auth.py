from __future__ import annotations

from typing import Any, Dict

from .base import APIError, BaseAPIClient


class AuthClient(BaseAPIClient):
    NAME = "auth"

    def login(self, username: str, password: str) -> Dict[str, Any]:
        """POST /auth/login -> {"data": user, "token": str}"""
        data = self._request(
            "POST",
            "/auth/login",
            json={"username": username, "password": password},
        )
        data = self._expect_object(data, "login")
        token = data.get("token")
        if not isinstance(token, str) or not token:
            raise APIError(f"{self.NAME} login response missing token")
        return {"user": self._envelope_data(data, "login"), "token": token}

    def register(self, username: str, email: str, password: str) -> Dict[str, Any]:
        """POST /auth/register -> {"data": user}"""
        data = self._request(
            "POST",
            "/auth/register",
            json={"username": username, "email": email, "password": password},
        )
        return self._envelope_data(data, "register")

    def refresh(self) -> str:
        """POST /auth/refresh -> {"token": str}"""
        data = self._expect_object(self._request("POST", "/auth/refresh"), "refresh")
        token = data.get("token")
        if not isinstance(token, str) or not token:
            raise APIError(f"{self.NAME} refresh response missing token")
        return token

    def verify(self) -> Dict[str, Any]:
        """GET /auth/verify -> {"valid", "username", "is_admin", "message"}"""
        return self._expect_object(self._request("GET", "/auth/verify"), "verify")
