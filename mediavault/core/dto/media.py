from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Literal, Optional


ResourceType = Literal["image", "video"]
RESOURCE_TYPES = ("image", "video")


def _int(value: Any) -> int:
    try:
        return int(value or 0)
    except (TypeError, ValueError, OverflowError):
        return 0


@dataclass(frozen=True)
class ImageInfo:
    url: str
    width: int = 0                  # 0 when unknown
    height: int = 0
    size: int = 0                   # bytes
    mime_type: str = ""
    id: Optional[int] = None        # assigned by the server

    @classmethod
    def from_raw(cls, raw: Dict[str, Any]) -> "ImageInfo":
        return cls(
            url=str(raw.get("url") or ""),
            width=_int(raw.get("width")),
            height=_int(raw.get("height")),
            size=_int(raw.get("size")),
            mime_type=str(raw.get("mime_type") or ""),
            id=raw.get("id"),
        )

    def to_payload(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "url": self.url,
            "width": self.width,
            "height": self.height,
            "size": self.size,
            "mime_type": self.mime_type,
        }
        if self.id is not None:
            payload["id"] = self.id
        return payload


@dataclass(frozen=True)
class VideoInfo:
    url: str
    width: int = 0
    height: int = 0
    size: int = 0
    mime_type: str = ""
    is_local: bool = False          # uploaded file vs. external link
    id: Optional[int] = None

    @classmethod
    def from_raw(cls, raw: Dict[str, Any]) -> "VideoInfo":
        return cls(
            url=str(raw.get("url") or ""),
            width=_int(raw.get("width")),
            height=_int(raw.get("height")),
            size=_int(raw.get("size")),
            mime_type=str(raw.get("mime_type") or ""),
            is_local=bool(raw.get("is_local", False)),
            id=raw.get("id"),
        )

    def to_payload(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "url": self.url,
            "width": self.width,
            "height": self.height,
            "size": self.size,
            "mime_type": self.mime_type,
            "is_local": self.is_local,
        }
        if self.id is not None:
            payload["id"] = self.id
        return payload
