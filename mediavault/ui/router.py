"""
Client route table.

Paths map to page controllers. Routes whose controller sets
``requires_auth`` are guarded: without a stored token they resolve to the
login page with the original path and query carried in ``?redirect=``.
"""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Dict, Optional, Tuple, Type
from urllib.parse import parse_qs, quote, urlsplit

from mediavault.ui.controllers import (
    AdminController,
    LoginController,
    RegisterController,
    ResourceDetailController,
    ResourceEditController,
    ResourceListController,
    SubmitController,
    ViewController,
)

logger = logging.getLogger(__name__)


ROUTES = (
    ("home", re.compile(r"^/$"), ResourceListController),
    ("resources", re.compile(r"^/resources/?$"), ResourceListController),
    ("resource_detail", re.compile(r"^/resources/(?P<id>\d+)/?$"), ResourceDetailController),
    ("submit", re.compile(r"^/submit/?$"), SubmitController),
    ("login", re.compile(r"^/login/?$"), LoginController),
    ("register", re.compile(r"^/register/?$"), RegisterController),
    ("admin", re.compile(r"^/admin/?$"), AdminController),
    ("admin_edit", re.compile(r"^/admin/edit/(?P<id>\d+)/?$"), ResourceEditController),
)

ROUTE_CONTROLLERS: Dict[str, Type[ViewController]] = {name: cls for name, _, cls in ROUTES}


def requires_auth(name: str) -> bool:
    return ROUTE_CONTROLLERS[name].requires_auth


@dataclass(frozen=True)
class RouteMatch:
    name: str
    path: str
    params: Dict[str, str] = field(default_factory=dict)
    query: Dict[str, str] = field(default_factory=dict)
    query_string: str = ""

    @property
    def target(self) -> str:
        """Path plus the original query string."""
        return f"{self.path}?{self.query_string}" if self.query_string else self.path


def match_route(path: str) -> Optional[RouteMatch]:
    """Match a client path (optionally with a query string); None if unknown."""
    parts = urlsplit(path)
    route_path = parts.path or "/"
    query = {k: v[-1] for k, v in parse_qs(parts.query).items()}

    for name, pattern, _ in ROUTES:
        m = pattern.match(route_path)
        if m:
            return RouteMatch(
                name=name,
                path=route_path,
                params=m.groupdict(),
                query=query,
                query_string=parts.query,
            )
    return None


def login_redirect(path: str) -> str:
    """Login route carrying ``path`` (query included) as the redirect target."""
    return f"/login?redirect={quote(path, safe='/')}"


class Router:
    """Resolves paths and builds the controller for each page."""

    def __init__(self, auth, resources, *, compressor=None, background: bool = False):
        self._auth = auth
        self._resources = resources
        self._compressor = compressor
        self._background = background

    def resolve(self, path: str) -> Optional[RouteMatch]:
        """Match ``path`` and apply the auth guard."""
        match = match_route(path)
        if match is None:
            logger.warning(f"No route for {path}")
            return None

        if requires_auth(match.name) and not self._auth.is_logged_in():
            target = login_redirect(match.target)
            logger.info(f"Not logged in, redirecting {match.target} -> {target}")
            return match_route(target)
        return match

    def open(self, path: str) -> Tuple[Optional[RouteMatch], Optional[ViewController]]:
        match = self.resolve(path)
        if match is None:
            return None, None
        return match, self.controller_for(match)

    def controller_for(self, match: RouteMatch) -> ViewController:
        bg = self._background
        name = match.name

        if name in ("home", "resources"):
            return ResourceListController(self._resources, background=bg)
        if name == "resource_detail":
            return ResourceDetailController(self._resources, int(match.params["id"]), background=bg)
        if name == "submit":
            if self._compressor is None:
                raise RuntimeError("submit page needs an image compressor")
            return SubmitController(self._resources, self._compressor, background=bg)
        if name == "login":
            return LoginController(self._auth, redirect=match.query.get("redirect"), background=bg)
        if name == "register":
            return RegisterController(self._auth, background=bg)
        if name == "admin":
            return AdminController(self._resources, background=bg)
        if name == "admin_edit":
            return ResourceEditController(self._resources, int(match.params["id"]), background=bg)

        raise KeyError(name)
