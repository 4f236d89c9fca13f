from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Dict


@dataclass(frozen=True)
class UserDTO:
    id: int
    username: str
    email: str
    is_admin: bool

    created_at: str
    updated_at: str

    @classmethod
    def from_raw(cls, raw: Any) -> "UserDTO":
        """Raises ValueError when the payload is not a user object."""
        if not isinstance(raw, dict):
            raise ValueError("user payload is not an object")
        missing = [k for k in ("id", "username") if raw.get(k) is None]
        if missing:
            raise ValueError(f"user payload missing {', '.join(missing)}")
        return cls(
            id=int(raw["id"]),
            username=str(raw["username"]),
            email=str(raw.get("email") or ""),
            is_admin=bool(raw.get("is_admin", False)),
            created_at=str(raw.get("created_at") or ""),
            updated_at=str(raw.get("updated_at") or ""),
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class VerifyResultDTO:
    valid: bool
    username: str
    is_admin: bool
    message: str
