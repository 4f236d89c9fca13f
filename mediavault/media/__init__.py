from mediavault.media.processor import (
    CompressedImage,
    ImageCompressor,
    MediaProcessingError,
    is_image_file,
    is_video_file,
)

__all__ = [
    "CompressedImage",
    "ImageCompressor",
    "MediaProcessingError",
    "is_image_file",
    "is_video_file",
]
