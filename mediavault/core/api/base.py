"""
Endpoint clients for the MediaVault API.

These modules are UI-agnostic and DTO-agnostic: they perform one HTTP call
per method, unwrap the response envelope and return plain dict/list
payloads. DTO creation belongs to the managers.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from mediavault.core.errors import APIError
from mediavault.core.http_client import HttpClient

logger = logging.getLogger(__name__)


class BaseAPIClient:
    """Shared request plumbing for endpoint clients."""

    NAME: str = "api"

    def __init__(self, http: HttpClient):
        self.http = http

    def _request(
        self,
        method: str,
        path: str,
        *,
        params: Optional[Dict[str, Any]] = None,
        json: Any = None,
        api: bool = True,
    ) -> Any:
        return self.http.request(method, path, params=params, json=json, api=api)

    def _expect_object(self, payload: Any, what: str) -> Dict[str, Any]:
        if not isinstance(payload, dict):
            raise APIError(f"{self.NAME} {what} response not an object")
        return payload

    def _envelope_data(self, payload: Any, what: str) -> Any:
        """Return ``payload["data"]`` for ``{data: ...}`` envelopes."""
        payload = self._expect_object(payload, what)
        if "data" not in payload:
            raise APIError(f"{self.NAME} {what} response missing 'data'")
        return payload["data"]
