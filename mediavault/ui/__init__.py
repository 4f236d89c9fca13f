"""Qt-side view state: page controllers, workers and the route table."""

from .router import Router, RouteMatch, match_route, login_redirect

__all__ = ['Router', 'RouteMatch', 'match_route', 'login_redirect']
