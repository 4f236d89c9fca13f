import json
import os

import pytest
import requests
from cryptography.fernet import Fernet
from requests.adapters import BaseAdapter
from requests.structures import CaseInsensitiveDict

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from PyQt6.QtGui import QGuiApplication  # noqa: E402

from mediavault.core.database import DatabaseManager  # noqa: E402
from mediavault.core.http_client import HttpClient, HttpClientConfig  # noqa: E402
from mediavault.core.session_store import SessionStore  # noqa: E402


BASE_URL = "http://api.test"


@pytest.fixture(scope="session", autouse=True)
def qt_app():
    app = QGuiApplication.instance() or QGuiApplication([])
    yield app


@pytest.fixture
def encryption_key():
    return Fernet.generate_key()


@pytest.fixture
def db(tmp_path, encryption_key):
    manager = DatabaseManager(tmp_path / "data.db", encryption_key=encryption_key)
    manager.connect()
    yield manager
    manager.close()


@pytest.fixture
def session_store(db):
    return SessionStore(db)


class RecordingAdapter(BaseAdapter):
    """Transport adapter that records prepared requests and replays canned responses."""

    def __init__(self):
        super().__init__()
        self.requests = []
        self.timeouts = []
        self._queue = []

    def queue(self, body=None, *, status=200, raw=None):
        if raw is None:
            raw = b"" if body is None else json.dumps(body).encode()
        self._queue.append((status, raw))

    def queue_error(self, error):
        self._queue.append(error)

    @property
    def last(self):
        return self.requests[-1]

    def send(self, request, stream=False, timeout=None, verify=True, cert=None, proxies=None):
        self.requests.append(request)
        self.timeouts.append(timeout)

        item = self._queue.pop(0) if self._queue else (200, b"{}")
        if isinstance(item, Exception):
            raise item
        status, raw = item

        resp = requests.Response()
        resp.status_code = status
        resp.reason = "OK" if status < 400 else "Error"
        resp._content = raw
        resp.headers = CaseInsensitiveDict({"Content-Type": "application/json"})
        resp.encoding = "utf-8"
        resp.url = request.url
        resp.request = request
        return resp

    def close(self):
        pass


@pytest.fixture
def adapter():
    return RecordingAdapter()


@pytest.fixture
def http(session_store, adapter):
    client = HttpClient(HttpClientConfig(base_url=BASE_URL), session_store=session_store)
    client.session.mount("http://", adapter)
    yield client
    client.close()


def make_user(**overrides):
    user = {
        "id": 1,
        "username": "alice",
        "email": "alice@example.com",
        "is_admin": True,
        "created_at": "2024-01-01T00:00:00Z",
        "updated_at": "2024-01-01T00:00:00Z",
    }
    user.update(overrides)
    return user


def make_resource(**overrides):
    resource = {
        "id": 7,
        "title": "Sunset",
        "title_en": "Sunset",
        "description": "Evening sky",
        "resource_type": "image",
        "author": "bob",
        "source": "camera",
        "tags": ["sky", "evening"],
        "poster_image": "https://cdn.test/poster.jpg",
        "images": [
            {"id": 3, "url": "https://cdn.test/1.jpg", "width": 1920, "height": 1080,
             "size": 2048, "mime_type": "image/jpeg"},
        ],
        "videos": [],
        "links": {"magnet": ["magnet:?xt=abc"]},
        "tmdb_id": None,
        "stickers": [],
        "media_type": "image",
        "liked_by": [2],
        "is_approved": True,
        "created_at": "2024-01-01T00:00:00Z",
        "updated_at": "2024-01-02T00:00:00Z",
    }
    resource.update(overrides)
    return resource
