from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional, Union
import base64
import binascii
import logging

from mediavault.core.api import APIError, ResourcesClient
from mediavault.core.dto.resource import (
    WRITABLE_FIELDS,
    HealthStatusDTO,
    ResourceDTO,
    ResourceFilter,
    ResourcesPageDTO,
    ResourceStatsDTO,
)
from mediavault.core.resource_builder import ResourceDraft


logger = logging.getLogger(__name__)


class ResourcesManager:
    """
    Authoritative domain manager for resource retrieval and mutation.

    Guarantees:
    - One HTTP call per operation, no retries
    - Server order preserved
    - Returns DTOs only
    - Zero UI logic
    """

    def __init__(self, client: ResourcesClient):
        self._client = client

    # ---------------------------------------------------------
    # Listing
    # ---------------------------------------------------------

    def list(self, filter: Optional[ResourceFilter] = None) -> List[ResourceDTO]:
        return self.list_page(filter).resources

    def list_page(self, filter: Optional[ResourceFilter] = None) -> ResourcesPageDTO:
        filter = filter or ResourceFilter()
        params = filter.to_params()

        data = self._client.list_resources(params)
        resources = self._resources_from_raw(data.get("data", []))

        return ResourcesPageDTO(
            resources=resources,
            total=self._int(data.get("total"), len(resources)),
            page=self._int(data.get("page"), filter.page or 1),
            limit=self._int(data.get("limit"), filter.limit or len(resources)),
        )

    # ---------------------------------------------------------
    # Single resource
    # ---------------------------------------------------------

    def get(self, resource_id: int) -> ResourceDTO:
        self._validate_id(resource_id)
        return self._resource_from_raw(self._client.get_resource(resource_id))

    def create(self, resource: Union[ResourceDraft, Mapping[str, Any]]) -> ResourceDTO:
        if isinstance(resource, ResourceDraft):
            payload = resource.to_payload()
        else:
            payload = self._writable_payload(resource)
        created = self._resource_from_raw(self._client.create_resource(payload))
        logger.info(f"Created resource {created.id} ('{created.title}')")
        return created

    def update(
        self,
        resource_id: int,
        changes: Union[ResourceDTO, Mapping[str, Any]],
    ) -> ResourceDTO:
        """
        Partial update: only the supplied fields change server-side.

        A ResourceDTO is sent whole (minus id and timestamps), so sending back
        a freshly fetched resource is a no-op update.
        """
        self._validate_id(resource_id)
        if isinstance(changes, ResourceDTO):
            payload = changes.to_payload()
        else:
            payload = self._writable_payload(changes)
        if not payload:
            raise ValueError("update requires at least one field")
        return self._resource_from_raw(self._client.update_resource(resource_id, payload))

    def delete(self, resource_id: int) -> bool:
        self._validate_id(resource_id)
        self._client.delete_resource(resource_id)
        logger.info(f"Deleted resource {resource_id}")
        return True

    def decrypt(self, resource_id: int, key_part_a: str, ukey_part_b: str) -> bytes:
        """
        Ask the server to decrypt a stored resource with the two key halves.

        Returns the decoded media bytes. A wrong key comes back as a 401
        ``HTTPStatusError``; a missing resource as a 404.
        """
        self._validate_id(resource_id)
        if not key_part_a or not ukey_part_b:
            raise ValueError("both key parts are required to decrypt a resource")

        data = self._client.decrypt_resource(resource_id, key_part_a, ukey_part_b).get("data")
        if not isinstance(data, str):
            raise APIError("resources decrypt response 'data' not a string")
        try:
            content = base64.b64decode(data, validate=True)
        except (binascii.Error, ValueError) as e:
            raise APIError(f"resources decrypt payload invalid: {e}") from e

        logger.info(f"Decrypted resource {resource_id} ({len(content)} bytes)")
        return content

    # ---------------------------------------------------------
    # Stats / health
    # ---------------------------------------------------------

    def get_stats(self) -> ResourceStatsDTO:
        data = self._client.get_stats()
        return ResourceStatsDTO(
            **{name: self._int(data.get(name), 0) for name in ResourceStatsDTO.__dataclass_fields__}
        )

    def health(self) -> HealthStatusDTO:
        data = self._client.health()
        return HealthStatusDTO(
            status=str(data.get("status") or "unknown"),
            timestamp=str(data.get("timestamp") or ""),
        )

    # ---------------------------------------------------------
    # Internal
    # ---------------------------------------------------------

    @staticmethod
    def _resource_from_raw(raw: Any) -> ResourceDTO:
        try:
            return ResourceDTO.from_raw(raw)
        except (TypeError, ValueError, OverflowError) as e:
            raise APIError(f"resources payload invalid: {e}") from e

    def _resources_from_raw(self, items: Any) -> List[ResourceDTO]:
        resources: List[ResourceDTO] = []
        if not isinstance(items, list):
            return resources
        for raw in items:
            try:
                resources.append(ResourceDTO.from_raw(raw))
            except (TypeError, ValueError, OverflowError) as e:
                logger.warning(f"Skipping malformed resource in list: {e}")
        return resources

    @staticmethod
    def _writable_payload(values: Mapping[str, Any]) -> Dict[str, Any]:
        unknown = sorted(set(values) - set(WRITABLE_FIELDS))
        if unknown:
            raise ValueError(f"not writable resource fields: {', '.join(unknown)}")
        payload: Dict[str, Any] = {}
        for key, value in values.items():
            if hasattr(value, "to_payload"):
                value = value.to_payload()
            elif isinstance(value, (list, tuple)):
                value = [v.to_payload() if hasattr(v, "to_payload") else v for v in value]
            payload[key] = value
        return payload

    @staticmethod
    def _int(value: Any, default: int) -> int:
        try:
            return int(value) if value is not None else default
        except (TypeError, ValueError, OverflowError):
            return default

    @staticmethod
    def _validate_id(resource_id: int) -> None:
        if isinstance(resource_id, bool) or not isinstance(resource_id, int) or resource_id < 1:
            raise ValueError(f"resource id must be a positive integer, got {resource_id!r}")
