"""
Centralized HTTP client configuration.

Provides the single requests session shared by every API client with:
- Fixed API prefix (/api) and timeout
- JSON default headers
- Bearer token injection from the session store on every request
- Translation of transport failures into the APIError family
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional
from urllib.parse import urlencode

import requests
from requests.auth import AuthBase

from mediavault.core.errors import (
    APIError,
    HTTPStatusError,
    NetworkError,
    RequestTimeoutError,
)

logger = logging.getLogger(__name__)


API_PREFIX = "/api"
DEFAULT_TIMEOUT_SECONDS = 10
DEFAULT_BASE_URL = "http://localhost:8080"

API_HEADERS = {
    "Content-Type": "application/json",
    "Accept": "application/json",
    "User-Agent": "MediaVault/1.0",
}


class BearerAuth(AuthBase):
    """
    Request hook that adds ``Authorization: Bearer <token>``.

    The token is read from the session store each time a request is
    prepared, so login/logout/refresh take effect on the next request.
    Requests go out without the header when no token is stored.
    """

    def __init__(self, session_store):
        self._store = session_store

    def __call__(self, request: requests.PreparedRequest) -> requests.PreparedRequest:
        token = self._store.get_token() if self._store is not None else None
        if token:
            request.headers["Authorization"] = f"Bearer {token}"
        return request


class HttpClientConfig:
    """Central HTTP client configuration."""

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        api_prefix: str = API_PREFIX,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        headers: Optional[Dict[str, str]] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.api_prefix = "/" + api_prefix.strip("/") if api_prefix.strip("/") else ""
        self.timeout = timeout
        self.headers = dict(headers or API_HEADERS)

    @property
    def api_root(self) -> str:
        return f"{self.base_url}{self.api_prefix}"


class HttpClient:
    """
    Shared HTTP client for all service calls.

    Does not retry and does not interpret status codes beyond tagging the
    failure; callers decide what an error means.
    """

    def __init__(
        self,
        config: Optional[HttpClientConfig] = None,
        *,
        session_store=None,
        session: Optional[requests.Session] = None,
    ):
        self.config = config or HttpClientConfig()
        self._session_store = session_store
        self.session = session or self.create_session()
        if session is not None:
            self._configure_session(self.session)

    def create_session(self) -> requests.Session:
        """Create a configured requests.Session."""
        session = requests.Session()
        self._configure_session(session)
        return session

    def _configure_session(self, session: requests.Session) -> None:
        session.headers.update(self.config.headers)
        session.auth = BearerAuth(self._session_store)

    def url(self, path: str, *, api: bool = True) -> str:
        if not path.startswith("/"):
            path = f"/{path}"
        root = self.config.api_root if api else self.config.base_url
        return f"{root}{path}"

    def request(
        self,
        method: str,
        path: str,
        *,
        params: Optional[Dict[str, Any]] = None,
        json: Any = None,
        api: bool = True,
    ) -> Any:
        """
        Perform one request and return the decoded JSON body.

        Args:
            method: HTTP method
            path: Path below the API prefix (or below the origin when api=False)
            params: Query parameters; None values are dropped
            json: JSON request body
            api: Prefix the path with the API root

        Returns:
            Decoded JSON, or None for an empty body

        Raises:
            RequestTimeoutError, NetworkError, HTTPStatusError, APIError
        """
        url = self.url(path, api=api)
        if params:
            params = {k: v for k, v in params.items() if v is not None}

        if params:
            logger.debug(f"Request params: {params}")
            logger.info(f"API Request: {method} {url}?{urlencode(params, doseq=True)}")
        else:
            logger.info(f"API Request: {method} {url}")

        try:
            resp = self.session.request(
                method=method,
                url=url,
                params=params or None,
                json=json,
                timeout=self.config.timeout,
            )
        except requests.exceptions.Timeout as e:
            raise RequestTimeoutError(f"{method} {path} timed out after {self.config.timeout}s") from e
        except requests.exceptions.RequestException as e:
            raise NetworkError(f"{method} {path} failed: {e}") from e

        if not resp.ok:
            body = self._safe_body(resp)
            raise HTTPStatusError(
                resp.status_code,
                f"API error {resp.status_code} for {method} {path}: {resp.text[:200]}",
                body=body,
            )

        if not resp.content:
            return None
        try:
            return resp.json()
        except ValueError as e:
            raise APIError(f"{method} {path} returned invalid JSON") from e

    @staticmethod
    def _safe_body(resp: requests.Response) -> Any:
        try:
            return resp.json()
        except ValueError:
            return resp.text or None

    def close(self):
        """Close the underlying session."""
        self.session.close()


def create_http_client_from_settings(db_manager, session_store=None) -> HttpClient:
    """
    Create HttpClient configured from database settings.

    Args:
        db_manager: DatabaseManager instance to read settings from
        session_store: SessionStore supplying the bearer token

    Returns:
        Configured HttpClient instance
    """
    base_url = db_manager.get_config("api_base_url", DEFAULT_BASE_URL) or DEFAULT_BASE_URL
    try:
        timeout = float(db_manager.get_config("http_timeout_seconds", DEFAULT_TIMEOUT_SECONDS))
    except (TypeError, ValueError):
        timeout = DEFAULT_TIMEOUT_SECONDS

    config = HttpClientConfig(base_url=base_url, timeout=timeout)
    logger.info(f"HTTP client configured for {config.api_root} (timeout {timeout}s)")
    return HttpClient(config, session_store=session_store)

