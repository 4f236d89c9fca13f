from mediavault.core.api.base import BaseAPIClient, APIError
from mediavault.core.api.auth import AuthClient
from mediavault.core.api.resources import ResourcesClient

__all__ = [
    "BaseAPIClient",
    "APIError",
    "AuthClient",
    "ResourcesClient",
]
