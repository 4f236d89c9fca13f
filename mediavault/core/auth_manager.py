from __future__ import annotations

import logging
from typing import Optional

from mediavault.core.api import APIError, AuthClient
from mediavault.core.dto.user import UserDTO, VerifyResultDTO
from mediavault.core.session_store import SessionStore

logger = logging.getLogger(__name__)


class AuthManager:
    """
    Login, registration and session lifecycle.

    Guarantees:
    - Session is written only after a fully valid login response
    - Logout and refresh failure tear the session down
    - Errors from the transport are re-raised unchanged
    """

    def __init__(self, client: AuthClient, session_store: SessionStore):
        self._client = client
        self._store = session_store

    # ---------------------------------------------------------
    # Network operations
    # ---------------------------------------------------------

    def login(self, username: str, password: str) -> UserDTO:
        try:
            data = self._client.login(username, password)
            user = UserDTO.from_raw(data["user"])
        except (ValueError, TypeError, OverflowError) as e:
            logger.error(f"Login for '{username}' returned a malformed user: {e}")
            raise APIError(f"auth login response invalid: {e}") from e
        except APIError as e:
            logger.error(f"Login failed for '{username}': {e}")
            raise

        self._store.set_session(data["token"], user)
        logger.info(f"User '{user.username}' logged in")
        return user

    def register(self, username: str, email: str, password: str) -> UserDTO:
        try:
            raw = self._client.register(username, email, password)
            user = UserDTO.from_raw(raw)
        except (ValueError, TypeError, OverflowError) as e:
            raise APIError(f"auth register response invalid: {e}") from e
        except APIError as e:
            logger.error(f"Registration failed for '{username}': {e}")
            raise
        logger.info(f"Registered user '{user.username}'")
        return user

    def refresh_token(self) -> str:
        """
        Exchange the current token for a new one.

        On failure the whole session is cleared before the error propagates:
        a token that cannot be refreshed is no longer a valid session.
        """
        try:
            token = self._client.refresh()
        except APIError as e:
            logger.error(f"Token refresh failed, clearing session: {e}")
            self._store.clear_session()
            raise
        self._store.set_token(token)
        return token

    def verify(self) -> VerifyResultDTO:
        data = self._client.verify()
        return VerifyResultDTO(
            valid=bool(data.get("valid", False)),
            username=str(data.get("username") or ""),
            is_admin=bool(data.get("is_admin", False)),
            message=str(data.get("message") or ""),
        )

    # ---------------------------------------------------------
    # Local operations
    # ---------------------------------------------------------

    def logout(self) -> None:
        """Local only; the server keeps no session to invalidate."""
        self._store.clear_session()

    def get_current_user(self) -> Optional[UserDTO]:
        return self._store.get_user()

    def is_logged_in(self) -> bool:
        return self._store.is_authenticated()
