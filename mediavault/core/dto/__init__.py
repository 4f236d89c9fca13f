from mediavault.core.dto.user import UserDTO, VerifyResultDTO
from mediavault.core.dto.media import ImageInfo, VideoInfo, RESOURCE_TYPES
from mediavault.core.dto.resource import (
    LINK_PROVIDERS,
    WRITABLE_FIELDS,
    HealthStatusDTO,
    ResourceDTO,
    ResourceFilter,
    ResourcesPageDTO,
    ResourceStatsDTO,
    empty_links,
)

__all__ = [
    # Auth
    "UserDTO",
    "VerifyResultDTO",

    # Media descriptors
    "ImageInfo",
    "VideoInfo",
    "RESOURCE_TYPES",

    # Resources
    "LINK_PROVIDERS",
    "WRITABLE_FIELDS",
    "HealthStatusDTO",
    "ResourceDTO",
    "ResourceFilter",
    "ResourcesPageDTO",
    "ResourceStatsDTO",
    "empty_links",
]
