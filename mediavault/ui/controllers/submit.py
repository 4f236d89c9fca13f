"""
Resource submission form.

Images are compressed as they are queued; videos are queued untouched.
Validation runs locally before any request, and a valid submit issues
exactly one create call built through ResourceDraft.
"""
from __future__ import annotations

import logging
import mimetypes
from pathlib import Path
from typing import Iterable, List, Optional

from mediavault.core.dto.media import RESOURCE_TYPES, ImageInfo, VideoInfo
from mediavault.core.dto.resource import ResourceDTO
from mediavault.core.errors import ValidationError
from mediavault.core.resource_builder import ResourceDraft
from mediavault.media.processor import is_image_file, is_video_file
from mediavault.ui.controllers.base import ViewController

logger = logging.getLogger(__name__)

VIDEO_SOURCE_TYPES = ("url", "upload")
DEFAULT_VIDEO_MIME = "video/mp4"


class SubmitController(ViewController):
    TITLE_REQUIRED = "Please enter a resource title."
    VIDEO_URL_REQUIRED = "Video resources need a video URL."
    VIDEO_FILE_REQUIRED = "Please upload at least one video."
    IMAGE_REQUIRED = "Please upload at least one image."
    IMAGE_ERROR = "Image processing failed, please retry."
    VIDEO_ERROR = "Video processing failed, please retry."
    SUBMIT_ERROR = "Submission failed, please try again later."
    SUCCESS = "Resource submitted successfully!"

    def __init__(self, resources, compressor, *, background: bool = False, parent=None):
        super().__init__(background=background, parent=parent)
        self._resources = resources
        self._compressor = compressor
        self.created: Optional[ResourceDTO] = None
        self.success_message: Optional[str] = None
        self.reset_form()

    def reset_form(self) -> None:
        self.title = ""
        self.description = ""
        self.author = ""
        self.source = ""
        self.resource_type = "image"
        self.tags: List[str] = []
        self.video_url = ""
        self.poster_image = ""
        self.video_source_type = "url"
        self.images: List[ImageInfo] = []
        self.videos: List[VideoInfo] = []

    # ---------------------------------------------------------
    # Form fields
    # ---------------------------------------------------------

    def set_resource_type(self, resource_type: str) -> None:
        if resource_type not in RESOURCE_TYPES:
            raise ValueError(f"resource_type must be one of {RESOURCE_TYPES}")
        self.resource_type = resource_type
        self._notify()

    def set_video_source_type(self, source_type: str) -> None:
        if source_type not in VIDEO_SOURCE_TYPES:
            raise ValueError(f"video source must be one of {VIDEO_SOURCE_TYPES}")
        self.video_source_type = source_type
        self._notify()

    def add_tag(self, text: str) -> bool:
        tag = text.strip()
        if not tag or tag in self.tags:
            return False
        self.tags.append(tag)
        self._notify()
        return True

    def remove_tag(self, tag: str) -> None:
        self.tags = [t for t in self.tags if t != tag]
        self._notify()

    # ---------------------------------------------------------
    # Media queue
    # ---------------------------------------------------------

    def add_image_files(self, paths: Iterable[str | Path]) -> Optional[int]:
        """Compress and queue images; non-image files are skipped."""
        sources = [Path(p) for p in paths if is_image_file(p)]
        if not sources:
            return None
        return self._dispatch(
            "compress images",
            lambda: [self._compressor.compress(p) for p in sources],
            on_success=self._on_images_compressed,
            error_message=self.IMAGE_ERROR,
        )

    def _on_images_compressed(self, results) -> None:
        self.images.extend(
            ImageInfo(
                url=r.path.as_uri(),
                width=r.width,
                height=r.height,
                size=r.size,
                mime_type=r.mime_type,
            )
            for r in results
        )

    def add_video_files(self, paths: Iterable[str | Path]) -> int:
        """Queue local videos as-is; returns how many were added."""
        queued: List[VideoInfo] = []
        try:
            for p in paths:
                path = Path(p)
                if not is_video_file(path):
                    continue
                mime, _ = mimetypes.guess_type(path.name)
                queued.append(
                    VideoInfo(
                        url=path.resolve().as_uri(),
                        size=path.stat().st_size,
                        mime_type=mime or DEFAULT_VIDEO_MIME,
                        is_local=True,
                    )
                )
        except OSError as e:
            logger.error(f"Video processing failed: {e}", exc_info=e)
            self.set_error(self.VIDEO_ERROR)
            return 0

        self.videos.extend(queued)
        self._notify()
        return len(queued)

    def remove_image(self, index: int) -> None:
        del self.images[index]
        self._notify()

    def remove_video(self, index: int) -> None:
        del self.videos[index]
        self._notify()

    # ---------------------------------------------------------
    # Submit
    # ---------------------------------------------------------

    def validate(self) -> None:
        if not self.title.strip():
            raise ValidationError("title", self.TITLE_REQUIRED)

        if self.resource_type == "video":
            if self.video_source_type == "url" and not self.video_url.strip():
                raise ValidationError("video_url", self.VIDEO_URL_REQUIRED)
            if self.video_source_type == "upload" and not self.videos:
                raise ValidationError("videos", self.VIDEO_FILE_REQUIRED)

        if self.resource_type == "image" and not self.images:
            raise ValidationError("images", self.IMAGE_REQUIRED)

    def build_draft(self) -> ResourceDraft:
        if self.video_source_type == "url":
            url = self.video_url.strip()
            videos = [VideoInfo(url=url, mime_type=DEFAULT_VIDEO_MIME, is_local=False)] if url else []
        else:
            videos = list(self.videos)

        return ResourceDraft(
            title=self.title.strip(),
            resource_type=self.resource_type,
            description=self.description,
            author=self.author,
            source=self.source,
            tags=list(self.tags),
            poster_image=self.poster_image,
            images=list(self.images),
            videos=videos,
        )

    def submit(self) -> bool:
        self.success_message = None
        try:
            self.validate()
        except ValidationError as e:
            self.set_error(e.message)
            return False

        draft = self.build_draft()
        self._dispatch(
            "submit resource",
            lambda: self._resources.create(draft),
            on_success=self._on_created,
            error_message=self.SUBMIT_ERROR,
        )
        return True

    def _on_created(self, resource: ResourceDTO) -> None:
        self.created = resource
        self.success_message = self.SUCCESS
        self.reset_form()
