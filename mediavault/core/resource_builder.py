"""
Explicit builder for the create-resource payload.

Every writable Resource field is declared here with its default, so the
fields a form does not collect are a visible list rather than an inline
literal at the call site.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from mediavault.core.dto.media import RESOURCE_TYPES, ImageInfo, VideoInfo
from mediavault.core.dto.resource import empty_links


# Server-required fields the submit form never collects.
FORM_UNCOLLECTED_FIELDS = (
    "links",
    "tmdb_id",
    "stickers",
    "liked_by",
    "is_approved",
)


@dataclass
class ResourceDraft:
    title: str
    resource_type: str = "image"
    description: str = ""
    author: str = ""
    source: str = ""
    tags: List[str] = field(default_factory=list)
    poster_image: str = ""
    images: List[ImageInfo] = field(default_factory=list)
    videos: List[VideoInfo] = field(default_factory=list)

    # Not collected by the submit form
    title_en: Optional[str] = None          # falls back to title
    media_type: Optional[str] = None        # falls back to resource_type
    links: Dict[str, List[str]] = field(default_factory=empty_links)
    tmdb_id: Optional[int] = None
    stickers: List[str] = field(default_factory=list)
    liked_by: List[int] = field(default_factory=list)
    is_approved: bool = False

    def __post_init__(self):
        if self.resource_type not in RESOURCE_TYPES:
            raise ValueError(f"resource_type must be one of {RESOURCE_TYPES}, got {self.resource_type!r}")

    def to_payload(self) -> Dict[str, Any]:
        payload = {
            "title": self.title,
            "title_en": self.title_en or self.title,
            "description": self.description,
            "resource_type": self.resource_type,
            "author": self.author,
            "source": self.source,
            "tags": list(self.tags),
            "poster_image": self.poster_image,
            # Only the list matching the type is populated.
            "images": [i.to_payload() for i in self.images] if self.resource_type == "image" else [],
            "videos": [v.to_payload() for v in self.videos] if self.resource_type == "video" else [],
            "links": {k: list(v) for k, v in self.links.items()},
            "tmdb_id": self.tmdb_id,
            "stickers": list(self.stickers),
            "media_type": self.media_type or self.resource_type,
            "liked_by": list(self.liked_by),
            "is_approved": self.is_approved,
        }
        return payload
