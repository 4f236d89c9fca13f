import json
from urllib.parse import parse_qs, urlsplit

import pytest
import requests

from mediavault.core.dto.user import UserDTO
from mediavault.core.errors import (
    APIError,
    HTTPStatusError,
    NetworkError,
    RequestTimeoutError,
)
from mediavault.core.http_client import HttpClientConfig, create_http_client_from_settings

from conftest import make_user


def test_request_uses_api_prefix_and_default_timeout(http, adapter):
    adapter.queue({"data": []})
    assert http.request("GET", "/resources") == {"data": []}

    assert adapter.last.url == "http://api.test/api/resources"
    assert adapter.timeouts[-1] == 10
    assert adapter.last.headers["Content-Type"] == "application/json"


def test_bearer_header_follows_session_store(http, adapter, session_store):
    adapter.queue({})
    http.request("GET", "/resources")
    assert "Authorization" not in adapter.last.headers

    session_store.set_session("tok-42", UserDTO.from_raw(make_user()))
    adapter.queue({})
    http.request("GET", "/resources")
    assert adapter.last.headers["Authorization"] == "Bearer tok-42"

    session_store.clear_session()
    adapter.queue({})
    http.request("GET", "/resources")
    assert "Authorization" not in adapter.last.headers


def test_none_params_are_dropped(http, adapter):
    adapter.queue({})
    http.request("GET", "/resources", params={"type": "video", "page": 2, "search": None})

    query = parse_qs(urlsplit(adapter.last.url).query)
    assert query == {"type": ["video"], "page": ["2"]}


def test_json_body_is_sent(http, adapter):
    adapter.queue({"ok": True})
    http.request("POST", "/auth/login", json={"username": "alice", "password": "pw"})

    assert adapter.last.method == "POST"
    assert json.loads(adapter.last.body) == {"username": "alice", "password": "pw"}


def test_non_2xx_raises_status_error(http, adapter):
    adapter.queue({"error": "not found"}, status=404)

    with pytest.raises(HTTPStatusError) as excinfo:
        http.request("GET", "/resources/99")

    assert excinfo.value.status_code == 404
    assert excinfo.value.is_not_found
    assert excinfo.value.body == {"error": "not found"}


def test_timeout_and_connection_errors_are_mapped(http, adapter):
    adapter.queue_error(requests.exceptions.ConnectTimeout("slow"))
    with pytest.raises(RequestTimeoutError):
        http.request("GET", "/resources")

    adapter.queue_error(requests.exceptions.ConnectionError("refused"))
    with pytest.raises(NetworkError):
        http.request("GET", "/resources")


def test_all_failures_share_api_error_base(http, adapter):
    adapter.queue(status=500, raw=b"boom")
    with pytest.raises(APIError):
        http.request("GET", "/resources")


def test_invalid_json_raises_api_error(http, adapter):
    adapter.queue(raw=b"<html>")
    with pytest.raises(APIError):
        http.request("GET", "/resources")


def test_empty_body_returns_none(http, adapter):
    adapter.queue(status=204)
    assert http.request("DELETE", "/resources/1") is None


def test_non_api_path_skips_prefix(http, adapter):
    adapter.queue({"status": "ok"})
    http.request("GET", "/health", api=False)
    assert adapter.last.url == "http://api.test/health"


def test_config_normalizes_prefix():
    config = HttpClientConfig(base_url="http://host:8080/", api_prefix="api/")
    assert config.api_root == "http://host:8080/api"


def test_client_from_settings(db):
    db.set_config("api_base_url", "http://media.local")
    db.set_config("http_timeout_seconds", "bogus")

    client = create_http_client_from_settings(db)
    try:
        assert client.config.api_root == "http://media.local/api"
        assert client.config.timeout == 10
    finally:
        client.close()
