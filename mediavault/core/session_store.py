"""
Persisted client session: the auth token and the cached user record.

Both live in the local config table under the keys ``token`` and ``user``.
They are written and removed together in one transaction. Reads are
optimistic: anything missing or undecodable is reported as absent.
"""

from __future__ import annotations

import json
import logging
from typing import Optional

from cryptography.fernet import InvalidToken

from mediavault.core.database import DatabaseManager
from mediavault.core.dto.user import UserDTO

logger = logging.getLogger(__name__)

TOKEN_KEY = "token"
USER_KEY = "user"


class SessionStore:
    """
    Narrow wrapper over the config table for session state.

    The store never talks to the network and does not track expiry: a token
    is trusted until a request carrying it is rejected.
    """

    def __init__(self, db: DatabaseManager):
        self._db = db

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def set_session(self, token: str, user: UserDTO) -> None:
        if not token:
            raise ValueError("token must be a non-empty string")
        self._db.set_configs(
            {TOKEN_KEY: token, USER_KEY: json.dumps(user.to_dict())},
            encrypt_keys=(TOKEN_KEY,),
        )
        logger.info(f"Session stored for user '{user.username}'")

    def set_token(self, token: str) -> None:
        """Replace the token only; the cached user is left as is."""
        if not token:
            raise ValueError("token must be a non-empty string")
        self._db.set_config(TOKEN_KEY, token, encrypt=True)
        logger.debug("Session token replaced")

    def clear_session(self) -> None:
        self._db.delete_config(TOKEN_KEY, USER_KEY)
        logger.info("Session cleared")

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def get_token(self) -> Optional[str]:
        try:
            token = self._db.get_config(TOKEN_KEY)
        except InvalidToken:
            logger.warning("Stored token could not be decrypted, treating as absent")
            return None
        return token or None

    def get_user(self) -> Optional[UserDTO]:
        raw = self._db.get_config(USER_KEY)
        if not raw:
            return None
        try:
            return UserDTO.from_raw(json.loads(raw))
        except (ValueError, TypeError, OverflowError) as e:
            # json.JSONDecodeError is a ValueError
            logger.warning(f"Cached user is unreadable, treating as absent: {e}")
            return None

    def is_authenticated(self) -> bool:
        return self._db.has_config(TOKEN_KEY)
