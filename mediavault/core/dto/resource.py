from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Optional

from .media import RESOURCE_TYPES, ImageInfo, VideoInfo


LINK_PROVIDERS = (
    "magnet",
    "ed2k",
    "uc",
    "mobile",
    "tianyi",
    "quark",
    "115",
    "aliyun",
    "pikpak",
    "baidu",
    "123",
    "xunlei",
    "online",
    "others",
)

# Fields the client may send on create/update. id and timestamps are server-owned.
WRITABLE_FIELDS = (
    "title",
    "title_en",
    "description",
    "resource_type",
    "author",
    "source",
    "tags",
    "poster_image",
    "images",
    "videos",
    "links",
    "tmdb_id",
    "stickers",
    "media_type",
    "liked_by",
    "is_approved",
)


def empty_links() -> Dict[str, List[str]]:
    return {provider: [] for provider in LINK_PROVIDERS}


def normalize_links(raw: Any) -> Dict[str, List[str]]:
    """Known providers always present; unknown providers from the server are kept."""
    links = empty_links()
    if not isinstance(raw, dict):
        return links
    for provider, urls in raw.items():
        if isinstance(urls, str):
            urls = [urls]
        if not isinstance(urls, list):
            continue
        links[str(provider)] = [str(u) for u in urls if u]
    return links


def _str_list(raw: Any) -> List[str]:
    if not isinstance(raw, list):
        return []
    return [str(x) for x in raw if x is not None]


@dataclass(frozen=True)
class ResourceDTO:
    id: int
    title: str
    title_en: str
    description: str
    resource_type: str              # "image" | "video"

    author: Optional[str]
    source: str
    tags: List[str]
    poster_image: str

    images: List[ImageInfo]
    videos: List[VideoInfo]
    links: Dict[str, List[str]]

    tmdb_id: Optional[int]
    stickers: List[str]
    media_type: str

    created_at: str
    updated_at: str

    liked_by: List[int] = field(default_factory=list)
    is_approved: bool = False

    @classmethod
    def from_raw(cls, raw: Any) -> "ResourceDTO":
        """Raises ValueError when the payload is not a resource object."""
        if not isinstance(raw, dict):
            raise ValueError("resource payload is not an object")
        if raw.get("id") is None:
            raise ValueError("resource payload missing id")

        resource_type = str(raw.get("resource_type") or raw.get("media_type") or "image")

        images = [ImageInfo.from_raw(i) for i in raw.get("images") or [] if isinstance(i, dict)]
        videos = [VideoInfo.from_raw(v) for v in raw.get("videos") or [] if isinstance(v, dict)]

        # Legacy single-URL field: migrate into the canonical videos list.
        legacy_url = raw.get("video_url")
        if not videos and isinstance(legacy_url, str) and legacy_url.strip():
            videos = [VideoInfo(url=legacy_url.strip(), is_local=False)]

        tmdb_id = raw.get("tmdb_id")
        liked_by = raw.get("liked_by") if isinstance(raw.get("liked_by"), list) else []

        return cls(
            id=int(raw["id"]),
            title=str(raw.get("title") or ""),
            title_en=str(raw.get("title_en") or ""),
            description=str(raw.get("description") or ""),
            resource_type=resource_type,
            author=raw.get("author"),
            source=str(raw.get("source") or ""),
            tags=_str_list(raw.get("tags")),
            poster_image=str(raw.get("poster_image") or ""),
            images=images,
            videos=videos,
            links=normalize_links(raw.get("links")),
            tmdb_id=int(tmdb_id) if tmdb_id is not None else None,
            stickers=_str_list(raw.get("stickers")),
            media_type=str(raw.get("media_type") or resource_type),
            created_at=str(raw.get("created_at") or ""),
            updated_at=str(raw.get("updated_at") or ""),
            liked_by=[int(x) for x in liked_by if x is not None],
            is_approved=bool(raw.get("is_approved", False)),
        )

    @property
    def is_video(self) -> bool:
        return self.resource_type == "video"

    def to_payload(self) -> Dict[str, Any]:
        """JSON body for create/update: every writable field, no id or timestamps."""
        return {
            "title": self.title,
            "title_en": self.title_en,
            "description": self.description,
            "resource_type": self.resource_type,
            "author": self.author,
            "source": self.source,
            "tags": list(self.tags),
            "poster_image": self.poster_image,
            "images": [i.to_payload() for i in self.images],
            "videos": [v.to_payload() for v in self.videos],
            "links": {k: list(v) for k, v in self.links.items()},
            "tmdb_id": self.tmdb_id,
            "stickers": list(self.stickers),
            "media_type": self.media_type,
            "liked_by": list(self.liked_by),
            "is_approved": self.is_approved,
        }

    def with_changes(self, **changes: Any) -> "ResourceDTO":
        return replace(self, **changes)


@dataclass(frozen=True)
class ResourceFilter:
    """
    Query options for the resource list.

    Unset options are omitted from the request so the API applies its own
    defaults. page is 1-based.
    """
    type: Optional[str] = None
    page: Optional[int] = None
    limit: Optional[int] = None
    search: Optional[str] = None

    def __post_init__(self):
        if self.type and self.type not in RESOURCE_TYPES:
            raise ValueError(f"type must be one of {RESOURCE_TYPES}, got {self.type!r}")
        if self.page is not None and self.page < 1:
            raise ValueError("page must be >= 1")
        if self.limit is not None and self.limit < 1:
            raise ValueError("limit must be >= 1")

    def to_params(self) -> Dict[str, Any]:
        params: Dict[str, Any] = {}
        if self.type:
            params["type"] = self.type
        if self.page is not None:
            params["page"] = self.page
        if self.limit is not None:
            params["limit"] = self.limit
        if self.search:
            params["search"] = self.search
        return params


@dataclass(frozen=True)
class ResourcesPageDTO:
    resources: List[ResourceDTO]
    total: int
    page: int
    limit: int

    @property
    def page_count(self) -> int:
        if self.limit <= 0:
            return 1
        return max(1, -(-self.total // self.limit))

    @property
    def has_more(self) -> bool:
        return self.page < self.page_count


@dataclass(frozen=True)
class ResourceStatsDTO:
    total: int = 0
    pending: int = 0
    approved: int = 0
    rejected: int = 0
    videos: int = 0
    images: int = 0
    local: int = 0
    external: int = 0


@dataclass(frozen=True)
class HealthStatusDTO:
    status: str
    timestamp: str

    @property
    def ok(self) -> bool:
        return self.status == "ok"
