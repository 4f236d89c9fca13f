"""
Local SQLite store for MediaVault.

A single ``config`` table holds application settings next to the persisted
session keys. Values flagged ``is_encrypted`` are Fernet tokens; the key
lives in the OS credential store unless one is passed in.
"""
import sqlite3
import logging
from pathlib import Path
from typing import Any, Dict, Iterable, Mapping, Optional

import keyring
from cryptography.fernet import Fernet

logger = logging.getLogger(__name__)

KEYRING_SERVICE = "MediaVault"
KEYRING_KEY_NAME = "encryption_key"

CONFIG_SCHEMA = """
    CREATE TABLE IF NOT EXISTS config (
        key TEXT PRIMARY KEY,
        value TEXT NOT NULL,
        is_encrypted INTEGER DEFAULT 0,
        updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
    )
"""

# Seeded on first connect; existing values are never overwritten.
DEFAULT_SETTINGS = {
    'api_base_url': 'http://localhost:8080',
    'http_timeout_seconds': '10',
    'image_quality': '80',
    'image_max_width': '1920',
    'image_max_height': '1080',
}


class DatabaseManager:
    """Settings and session persistence on top of one SQLite file"""

    VERSION = "1.0.0"

    def __init__(self, db_path: Optional[Path] = None, encryption_key: Optional[bytes] = None):
        """
        Args:
            db_path: SQLite file. Defaults to ~/.mediavault/data.db
            encryption_key: Fernet key for encrypted values. Loaded from (or
                            created in) the OS keyring when omitted.
        """
        self.db_path = Path(db_path) if db_path else Path.home() / ".mediavault" / "data.db"
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self.conn: Optional[sqlite3.Connection] = None
        self._fernet = Fernet(encryption_key or self._load_keyring_key())

    # ------------------------------------------------------------------
    # Encryption
    # ------------------------------------------------------------------

    @staticmethod
    def _load_keyring_key() -> bytes:
        """Fetch the Fernet key from the keyring, generating one on first run"""
        try:
            stored = keyring.get_password(KEYRING_SERVICE, KEYRING_KEY_NAME)
            if stored:
                return stored.encode()
        except Exception as e:
            logger.warning(f"Keyring lookup failed, generating a new key: {e}")

        key = Fernet.generate_key()
        try:
            keyring.set_password(KEYRING_SERVICE, KEYRING_KEY_NAME, key.decode())
        except Exception as e:
            # Values encrypted with this key will not survive a restart.
            logger.error(f"Could not save encryption key to keyring: {e}")
        return key

    def _encrypt_value(self, value: str) -> str:
        return self._fernet.encrypt(value.encode()).decode()

    def _decrypt_value(self, encrypted_value: str) -> str:
        """Raises cryptography.fernet.InvalidToken for a foreign or damaged value."""
        return self._fernet.decrypt(encrypted_value.encode()).decode()

    # ------------------------------------------------------------------
    # Connection
    # ------------------------------------------------------------------

    def connect(self):
        """Open the database and make sure the schema and defaults exist"""
        self.conn = sqlite3.connect(self.db_path, check_same_thread=False, timeout=30.0)
        self.conn.row_factory = sqlite3.Row

        fresh = self.conn.execute(
            "SELECT 1 FROM sqlite_master WHERE type='table' AND name='config'"
        ).fetchone() is None

        with self.conn:
            self.conn.execute(CONFIG_SCHEMA)
            seeds = dict(DEFAULT_SETTINGS, app_version=self.VERSION)
            self.conn.executemany(
                "INSERT OR IGNORE INTO config (key, value) VALUES (?, ?)",
                seeds.items(),
            )

        if fresh:
            logger.info(f"Created settings database at {self.db_path}")
        else:
            logger.debug(f"Opened settings database at {self.db_path}")

    def close(self):
        if self.conn:
            self.conn.close()
            self.conn = None

    # ------------------------------------------------------------------
    # Config values
    # ------------------------------------------------------------------

    def get_config(self, key: str, default: Any = None) -> Any:
        """
        Read one value, decrypting it when it was stored encrypted.

        Returns ``default`` when the key is absent.
        """
        row = self.conn.execute(
            "SELECT value, is_encrypted FROM config WHERE key = ?", (key,)
        ).fetchone()
        if row is None:
            return default
        if row['is_encrypted']:
            return self._decrypt_value(row['value'])
        return row['value']

    def has_config(self, key: str) -> bool:
        """Presence check that never decrypts"""
        return self.conn.execute(
            "SELECT 1 FROM config WHERE key = ?", (key,)
        ).fetchone() is not None

    def set_config(self, key: str, value: Any, encrypt: bool = False):
        self.set_configs({key: value}, encrypt_keys=(key,) if encrypt else ())

    def set_configs(self, values: Mapping[str, Any], encrypt_keys: Iterable[str] = ()):
        """
        Write several values atomically.

        Args:
            values: key -> value; values are stored as text
            encrypt_keys: keys whose values are Fernet-encrypted before writing
        """
        encrypted = set(encrypt_keys)
        rows = [
            (key, self._encrypt_value(str(value)) if key in encrypted else str(value), int(key in encrypted))
            for key, value in values.items()
        ]
        with self.conn:
            self.conn.executemany(
                """
                INSERT OR REPLACE INTO config (key, value, is_encrypted, updated_at)
                VALUES (?, ?, ?, CURRENT_TIMESTAMP)
                """,
                rows,
            )

    def delete_config(self, *keys: str):
        """Remove keys atomically; missing keys are ignored"""
        with self.conn:
            self.conn.executemany("DELETE FROM config WHERE key = ?", [(k,) for k in keys])

    def get_all_config(self) -> Dict[str, str]:
        """Plain-text settings only; encrypted values are left out"""
        rows = self.conn.execute("SELECT key, value FROM config WHERE is_encrypted = 0")
        return {row['key']: row['value'] for row in rows}
