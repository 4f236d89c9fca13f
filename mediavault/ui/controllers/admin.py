from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from mediavault.core.dto.resource import WRITABLE_FIELDS, ResourceDTO, ResourceFilter, ResourceStatsDTO
from mediavault.ui.controllers.base import ViewController

logger = logging.getLogger(__name__)

ADMIN_PAGE_LIMIT = 100


class AdminController(ViewController):
    """
    Admin resource table with a two-step delete.

    ``request_delete`` only arms ``pending_delete_id``; nothing is sent
    until ``confirm_delete``. A failed delete keeps both the list and the
    armed id so the user can retry or cancel.
    """

    requires_auth = True

    LOAD_ERROR = "Failed to load resources, please try again later."
    DELETE_ERROR = "Failed to delete resource, please try again later."
    STATS_ERROR = "Failed to load statistics, please try again later."

    def __init__(self, resources, *, background: bool = False, parent=None):
        super().__init__(background=background, parent=parent)
        self._resources = resources
        self.items: List[ResourceDTO] = []
        self.pending_delete_id: Optional[int] = None
        self.stats: Optional[ResourceStatsDTO] = None

    # ---------------------------------------------------------
    # Loading
    # ---------------------------------------------------------

    def load(self) -> int:
        query = ResourceFilter(page=1, limit=ADMIN_PAGE_LIMIT)
        return self._dispatch(
            "load admin resources",
            lambda: self._resources.list(query),
            on_success=self._on_loaded,
            error_message=self.LOAD_ERROR,
        )

    def load_stats(self) -> int:
        return self._dispatch(
            "load resource stats",
            self._resources.get_stats,
            on_success=self._on_stats,
            error_message=self.STATS_ERROR,
        )

    def _on_loaded(self, items: List[ResourceDTO]) -> None:
        self.items = list(items)

    def _on_stats(self, stats: ResourceStatsDTO) -> None:
        self.stats = stats

    # ---------------------------------------------------------
    # Two-step delete
    # ---------------------------------------------------------

    def request_delete(self, resource_id: int) -> None:
        self.pending_delete_id = resource_id
        self._notify()

    def cancel_delete(self) -> None:
        self.pending_delete_id = None
        self._notify()

    def confirm_delete(self) -> Optional[int]:
        resource_id = self.pending_delete_id
        if resource_id is None:
            return None
        return self._dispatch(
            f"delete resource {resource_id}",
            lambda: self._resources.delete(resource_id),
            on_success=lambda _ok: self._on_deleted(resource_id),
            error_message=self.DELETE_ERROR,
        )

    def _on_deleted(self, resource_id: int) -> None:
        self.items = [r for r in self.items if r.id != resource_id]
        if self.pending_delete_id == resource_id:
            self.pending_delete_id = None


class ResourceEditController(ViewController):
    """Edit page for one resource; saves only the fields that changed."""

    requires_auth = True

    LOAD_ERROR = "Failed to load resource details, please try again later."
    SAVE_ERROR = "Failed to save resource, please try again later."
    SAVED = "Resource updated."
    NO_CHANGES = "No changes to save."
    TITLE_REQUIRED = "Please enter a title."

    def __init__(self, resources, resource_id: int, *, background: bool = False, parent=None):
        super().__init__(background=background, parent=parent)
        self._resources = resources
        self.resource_id = resource_id
        self.resource: Optional[ResourceDTO] = None
        self.success_message: Optional[str] = None

    def load(self) -> int:
        return self._dispatch(
            "load resource for edit",
            lambda: self._resources.get(self.resource_id),
            on_success=self._on_loaded,
            error_message=self.LOAD_ERROR,
        )

    def _on_loaded(self, resource: ResourceDTO) -> None:
        self.resource = resource

    def changed_fields(self, changes: Dict[str, Any]) -> Dict[str, Any]:
        unknown = sorted(set(changes) - set(WRITABLE_FIELDS))
        if unknown:
            raise ValueError(f"not editable: {', '.join(unknown)}")
        if self.resource is None:
            return dict(changes)
        current = self.resource.to_payload()
        diff = {}
        for key, value in changes.items():
            compare = value.to_payload() if hasattr(value, "to_payload") else value
            if isinstance(value, (list, tuple)):
                compare = [v.to_payload() if hasattr(v, "to_payload") else v for v in value]
            if current.get(key) != compare:
                diff[key] = value
        return diff

    def save(self, **changes: Any) -> bool:
        self.success_message = None
        if self.resource is None:
            self.set_error(self.LOAD_ERROR)
            return False
        if "title" in changes and not str(changes["title"] or "").strip():
            self.set_error(self.TITLE_REQUIRED)
            return False

        diff = self.changed_fields(changes)
        if not diff:
            self.success_message = self.NO_CHANGES
            self._notify()
            return False

        self._dispatch(
            f"update resource {self.resource_id}",
            lambda: self._resources.update(self.resource_id, diff),
            on_success=self._on_saved,
            error_message=self.SAVE_ERROR,
        )
        return True

    def _on_saved(self, resource: ResourceDTO) -> None:
        self.resource = resource
        self.success_message = self.SAVED
