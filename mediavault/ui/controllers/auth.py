from __future__ import annotations

import logging
from typing import Optional

from mediavault.core.dto.user import UserDTO
from mediavault.core.errors import ValidationError
from mediavault.ui.controllers.base import ViewController

logger = logging.getLogger(__name__)


class LoginController(ViewController):
    """
    Login form.

    On success ``redirect_to`` holds the route to navigate to: the
    ``redirect`` query value the page was opened with, or ``/``.
    """

    MISSING_FIELDS = "Please enter username and password."
    LOGIN_ERROR = "Invalid username or password, please try again."

    def __init__(self, auth, *, redirect: Optional[str] = None, background: bool = False, parent=None):
        super().__init__(background=background, parent=parent)
        self._auth = auth
        self.redirect = redirect
        self.username = ""
        self.password = ""
        self.user: Optional[UserDTO] = None
        self.redirect_to: Optional[str] = None

    def validate(self) -> None:
        if not self.username.strip():
            raise ValidationError("username", self.MISSING_FIELDS)
        if not self.password:
            raise ValidationError("password", self.MISSING_FIELDS)

    def submit(self) -> bool:
        try:
            self.validate()
        except ValidationError as e:
            self.set_error(e.message)
            return False

        username, password = self.username.strip(), self.password
        self._dispatch(
            "login",
            lambda: self._auth.login(username, password),
            on_success=self._on_logged_in,
            error_message=self.LOGIN_ERROR,
        )
        return True

    def _on_logged_in(self, user: UserDTO) -> None:
        self.user = user
        self.password = ""
        self.redirect_to = self.redirect or "/"


class RegisterController(ViewController):
    """Registration form. Does not log the new user in."""

    REGISTER_ERROR = "Registration failed, please try again later."
    SUCCESS = "Registration successful, please log in."

    def __init__(self, auth, *, background: bool = False, parent=None):
        super().__init__(background=background, parent=parent)
        self._auth = auth
        self.username = ""
        self.email = ""
        self.password = ""
        self.user: Optional[UserDTO] = None
        self.success_message: Optional[str] = None

    def validate(self) -> None:
        if not self.username.strip():
            raise ValidationError("username", "Please enter a username.")
        if "@" not in self.email:
            raise ValidationError("email", "Please enter a valid email address.")
        if not self.password:
            raise ValidationError("password", "Please enter a password.")

    def submit(self) -> bool:
        self.success_message = None
        try:
            self.validate()
        except ValidationError as e:
            self.set_error(e.message)
            return False

        username, email, password = self.username.strip(), self.email.strip(), self.password
        self._dispatch(
            "register",
            lambda: self._auth.register(username, email, password),
            on_success=self._on_registered,
            error_message=self.REGISTER_ERROR,
        )
        return True

    def _on_registered(self, user: UserDTO) -> None:
        self.user = user
        self.password = ""
        self.success_message = self.SUCCESS
