from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from mediavault.core.api import AuthClient, ResourcesClient
from mediavault.core.auth_manager import AuthManager
from mediavault.core.database import DatabaseManager
from mediavault.core.http_client import (
    HttpClient,
    create_http_client_from_settings,
)
from mediavault.core.resources_manager import ResourcesManager
from mediavault.core.session_store import SessionStore

logger = logging.getLogger(__name__)


class CacheConfig:
    """Local data layout: the settings DB, compressed uploads and logs under one root."""

    def __init__(self, base_dir: Optional[Path] = None):
        self.base = Path(base_dir) if base_dir else Path.home() / ".mediavault"
        self.base.mkdir(parents=True, exist_ok=True)

    @property
    def uploads(self) -> Path:
        """Compressed images queued for submission"""
        path = self.base / "uploads"
        path.mkdir(parents=True, exist_ok=True)
        return path

    @property
    def logs(self) -> Path:
        path = self.base / "logs"
        path.mkdir(parents=True, exist_ok=True)
        return path


class AppContext:
    """
    Shared dependencies (DB + session + HTTP client + managers).

    Use a single instance for app lifetime. The session store is created
    here and injected into the HTTP client and the auth manager; nothing
    else reaches persisted session state.
    """

    def __init__(
        self,
        *,
        db: Optional[DatabaseManager] = None,
        http_client: Optional[HttpClient] = None,
        cache_config: Optional[CacheConfig] = None,
    ):
        self.cache = cache_config or CacheConfig()
        self.db = db or DatabaseManager(self.cache.base / "data.db")

        # Connect early so settings can be read
        if self.db.conn is None:
            self.db.connect()

        self.session_store = SessionStore(self.db)

        self.http = http_client or create_http_client_from_settings(
            self.db, session_store=self.session_store
        )

        self.auth = AuthManager(AuthClient(self.http), self.session_store)
        self.resources = ResourcesManager(ResourcesClient(self.http))

        logger.info(
            f"App context ready - api: {self.http.config.api_root}, "
            f"logged in: {self.auth.is_logged_in()}"
        )

    def image_compressor(self):
        """Build the submit-flow image compressor from settings."""
        from mediavault.media.processor import ImageCompressor

        def _setting(key: str, default: int) -> int:
            try:
                return int(self.db.get_config(key, default))
            except (TypeError, ValueError):
                return default

        return ImageCompressor(
            self.cache.uploads,
            quality=_setting("image_quality", 80),
            max_width=_setting("image_max_width", 1920),
            max_height=_setting("image_max_height", 1080),
        )

    def close(self) -> None:
        self.http.close()
        self.db.close()
