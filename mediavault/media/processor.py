from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from PyQt6.QtGui import QImage
from PyQt6.QtCore import Qt


logger = logging.getLogger(__name__)

IMAGE_EXTS = {".png", ".jpg", ".jpeg", ".gif", ".webp", ".bmp"}
VIDEO_EXTS = {".mp4", ".avi", ".mov", ".wmv", ".flv", ".webm", ".mkv", ".m4v"}


class MediaProcessingError(RuntimeError):
    """Raised when an input file cannot be decoded or re-encoded."""


@dataclass(frozen=True)
class CompressedImage:
    path: Path
    width: int
    height: int
    size: int
    mime_type: str = "image/jpeg"


class ImageCompressor:
    """
    Pure image re-encoding utility.

    Responsibilities:
    - Load images
    - Downscale to fit the bounding box (never upscale)
    - Re-encode as JPEG at a fixed quality

    Non-responsibilities:
    - Uploading
    - Threading
    - Video (passed through untouched by callers)
    """

    def __init__(
        self,
        output_dir: Path,
        *,
        quality: int = 80,
        max_width: int = 1920,
        max_height: int = 1080,
    ):
        if not 0 <= quality <= 100:
            raise ValueError("quality must be between 0 and 100")
        self.output_dir = Path(output_dir)
        self.quality = quality
        self.max_width = max_width
        self.max_height = max_height

    # ------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------

    def compress(self, source: str | Path, *, output_name: Optional[str] = None) -> CompressedImage:
        path = Path(source)

        if not path.exists():
            raise MediaProcessingError(f"Image not found: {path}")

        image = QImage(str(path))
        if image.isNull():
            raise MediaProcessingError(f"Unsupported or corrupt image: {path.name}")

        scaled = self._fit(image)

        self.output_dir.mkdir(parents=True, exist_ok=True)
        target = self.output_dir / (output_name or f"{path.stem}-{uuid.uuid4().hex[:8]}.jpg")

        # JPEG has no alpha channel.
        if scaled.hasAlphaChannel():
            scaled = scaled.convertToFormat(QImage.Format.Format_RGB32)

        if not scaled.save(str(target), "JPEG", self.quality):
            raise MediaProcessingError(f"Failed to encode {path.name} as JPEG")

        result = CompressedImage(
            path=target,
            width=scaled.width(),
            height=scaled.height(),
            size=target.stat().st_size,
        )
        logger.debug(
            f"Compressed {path.name}: {image.width()}x{image.height()} -> "
            f"{result.width}x{result.height}, {path.stat().st_size} -> {result.size} bytes"
        )
        return result

    # ------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------

    def _fit(self, image: QImage) -> QImage:
        if image.width() <= self.max_width and image.height() <= self.max_height:
            return image
        return image.scaled(
            self.max_width,
            self.max_height,
            Qt.AspectRatioMode.KeepAspectRatio,
            Qt.TransformationMode.SmoothTransformation,
        )


def is_image_file(path: str | Path) -> bool:
    return Path(path).suffix.lower() in IMAGE_EXTS


def is_video_file(path: str | Path) -> bool:
    return Path(path).suffix.lower() in VIDEO_EXTS
