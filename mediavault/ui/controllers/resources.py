"""
Browsing controllers: the resource gallery list and the detail page.
"""
from __future__ import annotations

import logging
from typing import List, Optional

from mediavault.core.dto.media import RESOURCE_TYPES
from mediavault.core.dto.resource import ResourceDTO, ResourceFilter, ResourcesPageDTO
from mediavault.ui.controllers.base import ViewController
from mediavault.ui.view_models import (
    DEFAULT_TILE_HEIGHT,
    DEFAULT_TILE_WIDTH,
    PLACEHOLDER_POSTER,
    GalleryTile,
    MediaItem,
)

logger = logging.getLogger(__name__)


class ResourceListController(ViewController):
    """Gallery of resources filtered by album type, with search and paging."""

    LOAD_ERROR = "Failed to load resources, please try again later."

    def __init__(
        self,
        resources,
        *,
        album_type: str = "video",
        page_size: Optional[int] = None,
        background: bool = False,
        parent=None,
    ):
        super().__init__(background=background, parent=parent)
        if album_type not in RESOURCE_TYPES:
            raise ValueError(f"album_type must be one of {RESOURCE_TYPES}")
        self._resources = resources
        self.album_type = album_type
        self.page_size = page_size
        self.page = 1
        self.search = ""

        self.items: List[ResourceDTO] = []
        self.total = 0
        self._last_page: Optional[ResourcesPageDTO] = None

    # ---------------------------------------------------------
    # Actions
    # ---------------------------------------------------------

    def load(self) -> int:
        query = ResourceFilter(
            type=self.album_type,
            page=self.page,
            limit=self.page_size,
            search=self.search or None,
        )
        return self._dispatch(
            "load resources",
            lambda: self._resources.list_page(query),
            on_success=self._on_loaded,
            error_message=self.LOAD_ERROR,
        )

    def retry(self) -> int:
        return self.load()

    def set_album_type(self, album_type: str) -> int:
        if album_type not in RESOURCE_TYPES:
            raise ValueError(f"album_type must be one of {RESOURCE_TYPES}")
        self.album_type = album_type
        self.page = 1
        return self.load()

    def set_search(self, text: str) -> int:
        self.search = text.strip()
        self.page = 1
        return self.load()

    def go_to_page(self, page: int) -> int:
        if page < 1:
            raise ValueError("page must be >= 1")
        self.page = page
        return self.load()

    # ---------------------------------------------------------
    # View data
    # ---------------------------------------------------------

    @property
    def page_count(self) -> int:
        return self._last_page.page_count if self._last_page else 1

    @property
    def is_empty(self) -> bool:
        return self.loaded and not self.items

    def tiles(self) -> List[GalleryTile]:
        return [
            GalleryTile(
                id=str(r.id),
                src=r.poster_image or PLACEHOLDER_POSTER,
                width=DEFAULT_TILE_WIDTH,
                height=DEFAULT_TILE_HEIGHT,
                alt=r.title,
                href=f"/resources/{r.id}",
                description=r.description,
                image_count=len(r.images),
                tags=tuple(r.tags),
            )
            for r in self.items
        ]

    def _on_loaded(self, page: ResourcesPageDTO) -> None:
        self._last_page = page
        self.items = list(page.resources)
        self.total = page.total


class ResourceDetailController(ViewController):
    """Single resource with its combined video + image album."""

    LOAD_ERROR = "Failed to load resource details, please try again later."

    def __init__(self, resources, resource_id: int, *, background: bool = False, parent=None):
        super().__init__(background=background, parent=parent)
        self._resources = resources
        self.resource_id = resource_id
        self.resource: Optional[ResourceDTO] = None
        self.selected_index = 0

    def load(self) -> int:
        return self._dispatch(
            "load resource",
            lambda: self._resources.get(self.resource_id),
            on_success=self._on_loaded,
            error_message=self.LOAD_ERROR,
        )

    def retry(self) -> int:
        return self.load()

    def _on_loaded(self, resource: ResourceDTO) -> None:
        self.resource = resource
        self.selected_index = 0

    def media_items(self) -> List[MediaItem]:
        """Videos first, then images, in server order."""
        r = self.resource
        if r is None:
            return []
        items = [
            MediaItem(
                id=f"video-{i}",
                src=v.url,
                media_type="video",
                width=v.width or DEFAULT_TILE_WIDTH,
                height=v.height or DEFAULT_TILE_HEIGHT,
                alt=f"{r.title} - video {i + 1}",
                is_local=v.is_local,
                mime_type=v.mime_type or None,
                poster=r.poster_image or None,
            )
            for i, v in enumerate(r.videos)
        ]
        items.extend(
            MediaItem(
                id=f"image-{i}",
                src=img.url,
                media_type="image",
                width=img.width or DEFAULT_TILE_WIDTH,
                height=img.height or DEFAULT_TILE_HEIGHT,
                alt=f"{r.title} - image {i + 1}",
                mime_type=img.mime_type or None,
            )
            for i, img in enumerate(r.images)
        )
        return items

    def select(self, index: int) -> None:
        count = len(self.media_items())
        if not 0 <= index < count:
            raise IndexError(f"media index {index} out of range (0..{count - 1})")
        self.selected_index = index
        self._notify()

    @property
    def selected_item(self) -> Optional[MediaItem]:
        items = self.media_items()
        if not items:
            return None
        return items[min(self.selected_index, len(items) - 1)]
