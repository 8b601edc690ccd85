"""HTTP client for the etcd v2 keys API."""

import logging
from typing import Any

import httpx

from fleetwatch.registry.errors import PartialLookupFailure, RegistryError

logger = logging.getLogger(__name__)

KEY_NOT_FOUND = 100


def _normalize_key(key: str) -> str:
    return "/" + key.strip("/")


class EtcdClient:
    """
    Read-only client for the etcd v2 keys API.

    Several comma-separated endpoints may be given; each request tries them
    in order until one answers.
    """

    def __init__(self, url: str, timeout: float = 5.0):
        """
        Initialize etcd client.

        Args:
            url: Endpoint URL, or several separated by commas
            timeout: Per-request timeout in seconds
        """
        self.endpoints = [u.strip().rstrip("/") for u in url.split(",") if u.strip()]
        if not self.endpoints:
            raise ValueError("At least one etcd endpoint is required")

        self.timeout = timeout
        self._client = httpx.AsyncClient(timeout=timeout)

    async def _request(self, key: str, params: dict[str, str] | None = None) -> httpx.Response:
        last_error: Exception | None = None

        for endpoint in self.endpoints:
            try:
                return await self._client.get(f"{endpoint}/v2/keys{key}", params=params)
            except httpx.TransportError as e:
                logger.debug("etcd endpoint %s unreachable: %s", endpoint, e)
                last_error = e

        raise RegistryError(f"etcd: no endpoint reachable for {key}: {last_error}")

    @staticmethod
    def _node(response: httpx.Response, key: str) -> dict[str, Any]:
        try:
            data = response.json()
        except ValueError as e:
            raise RegistryError(f"etcd: invalid JSON for {key}") from e

        node = data.get("node") if isinstance(data, dict) else None
        if not isinstance(node, dict):
            raise RegistryError(f"etcd: unexpected payload for {key}")
        return node

    @staticmethod
    def _is_not_found(response: httpx.Response) -> bool:
        if response.status_code != 404:
            return False
        try:
            data = response.json()
        except ValueError:
            return True
        if not isinstance(data, dict):
            return True
        return data.get("errorCode", KEY_NOT_FOUND) == KEY_NOT_FOUND

    async def get(self, key: str) -> str:
        """
        Read the value of a single key.

        Args:
            key: Key path, e.g. ``/machines/abc/hostname``

        Returns:
            The key's value

        Raises:
            PartialLookupFailure: If the key is missing, is a directory, or
                the lookup fails for any other reason
        """
        key = _normalize_key(key)
        try:
            response = await self._request(key)
        except RegistryError as e:
            raise PartialLookupFailure(key, str(e)) from e

        if self._is_not_found(response):
            raise PartialLookupFailure(key, "key not found")
        if response.is_error:
            raise PartialLookupFailure(key, f"HTTP {response.status_code}")

        try:
            node = self._node(response, key)
        except RegistryError as e:
            raise PartialLookupFailure(key, str(e)) from e

        if node.get("dir"):
            raise PartialLookupFailure(key, "key is a directory")
        return node.get("value", "")

    async def list(self, key: str) -> list[str]:
        """
        List the direct children of a directory key.

        A missing directory is treated as empty.

        Raises:
            RegistryError: If the listing fails
        """
        key = _normalize_key(key)
        response = await self._request(key)

        if self._is_not_found(response):
            return []
        if response.is_error:
            raise RegistryError(f"etcd: listing {key} returned HTTP {response.status_code}")

        node = self._node(response, key)
        return [child["key"] for child in node.get("nodes") or [] if "key" in child]

    async def close(self):
        """Close the HTTP client."""
        await self._client.aclose()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()
