from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


PLACEHOLDER_POSTER = "https://via.placeholder.com/600x400"
DEFAULT_TILE_WIDTH = 600
DEFAULT_TILE_HEIGHT = 400


@dataclass(frozen=True)
class GalleryTile:
    """One card in the resource list gallery."""
    id: str
    src: str
    width: int
    height: int
    alt: str
    href: str
    description: str = ""
    image_count: int = 0
    tags: tuple = ()


@dataclass(frozen=True)
class MediaItem:
    """One entry in the detail view's media album."""
    id: str
    src: str
    media_type: str  # "image" | "video"
    width: int
    height: int
    alt: str
    is_local: bool = False
    mime_type: Optional[str] = None
    poster: Optional[str] = None
