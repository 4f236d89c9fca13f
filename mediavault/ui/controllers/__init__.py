"""Page controllers: one per route, each owning its transient view state."""

from .base import ViewController, ViewStatus
from .resources import ResourceListController, ResourceDetailController
from .auth import LoginController, RegisterController
from .admin import AdminController, ResourceEditController
from .submit import SubmitController

__all__ = [
    'ViewController',
    'ViewStatus',
    'ResourceListController',
    'ResourceDetailController',
    'LoginController',
    'RegisterController',
    'AdminController',
    'ResourceEditController',
    'SubmitController',
]
