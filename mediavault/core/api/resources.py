from __future__ import annotations

from typing import Any, Dict, Optional

from .base import APIError, BaseAPIClient


class ResourcesClient(BaseAPIClient):
    NAME = "resources"

    # --------------------------------------------------
    # Reads
    # --------------------------------------------------

    def list_resources(self, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """GET /resources -> {"data": [...], "total", "page", "limit"}"""
        data = self._expect_object(
            self._request("GET", "/resources", params=params or None),
            "list",
        )
        items = data.get("data")
        if not isinstance(items, list):
            raise APIError(f"{self.NAME} list response 'data' not a list")
        return data

    def get_resource(self, resource_id: int) -> Dict[str, Any]:
        """GET /resources/{id} -> {"data": resource}"""
        return self._envelope_data(
            self._request("GET", f"/resources/{resource_id}"),
            "get",
        )

    def get_stats(self) -> Dict[str, Any]:
        """GET /resources/stats -> flat counters object"""
        return self._expect_object(self._request("GET", "/resources/stats"), "stats")

    # --------------------------------------------------
    # Writes
    # --------------------------------------------------

    def create_resource(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        """POST /resources -> {"data": resource}"""
        return self._envelope_data(
            self._request("POST", "/resources", json=payload),
            "create",
        )

    def update_resource(self, resource_id: int, payload: Dict[str, Any]) -> Dict[str, Any]:
        """PUT /resources/{id} -> {"data": resource}"""
        return self._envelope_data(
            self._request("PUT", f"/resources/{resource_id}", json=payload),
            "update",
        )

    def delete_resource(self, resource_id: int) -> None:
        """DELETE /resources/{id}; the body is ignored."""
        self._request("DELETE", f"/resources/{resource_id}")

    def decrypt_resource(self, resource_id: int, key_part_a: str, ukey_part_b: str) -> Dict[str, Any]:
        """POST /resources/{id}/decrypt -> {"data": base64 payload, "message"}"""
        return self._expect_object(
            self._request(
                "POST",
                f"/resources/{resource_id}/decrypt",
                json={"key_part_a": key_part_a, "ukey_part_b": ukey_part_b},
            ),
            "decrypt",
        )

    # --------------------------------------------------
    # Health
    # --------------------------------------------------

    def health(self) -> Dict[str, Any]:
        """GET /health (served outside the API prefix)"""
        return self._expect_object(self._request("GET", "/health", api=False), "health")
