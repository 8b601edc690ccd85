"""HTTP client for the fleet v1 scheduler API."""

import logging
from typing import Any

import httpx

from fleetwatch.registry.errors import RegistryError

logger = logging.getLogger(__name__)

API_PREFIX = "/fleet/v1"
SOCKET_HOST = "http://domain-sock"


class FleetClient:
    """
    Read-only client for the fleet scheduler.

    The endpoint may be a regular ``http(s)://host:port`` URL or a unix
    socket given as ``unix:///path/to/fleet.sock`` (``file://`` is accepted
    as an alias), in which case requests go over the socket.
    """

    def __init__(self, url: str, timeout: float = 5.0):
        """
        Initialize fleet client.

        Args:
            url: Fleet endpoint URL
            timeout: Per-request timeout in seconds
        """
        endpoint = httpx.URL(url)
        transport = None

        if endpoint.scheme in ("unix", "file"):
            transport = httpx.AsyncHTTPTransport(uds=endpoint.path)
            self.base_url = SOCKET_HOST
        else:
            self.base_url = url.rstrip("/")

        self.timeout = timeout
        self._client = httpx.AsyncClient(timeout=timeout, transport=transport)

    async def _get_json(self, path: str, params: dict[str, str] | None = None) -> dict[str, Any]:
        url = f"{self.base_url}{API_PREFIX}{path}"
        try:
            response = await self._client.get(url, params=params)
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPStatusError as e:
            raise RegistryError(
                f"fleet: GET {path} returned HTTP {e.response.status_code}"
            ) from e
        except httpx.HTTPError as e:
            raise RegistryError(f"fleet: GET {path} failed: {e}") from e
        except ValueError as e:
            raise RegistryError(f"fleet: GET {path} returned invalid JSON") from e

        if not isinstance(data, dict):
            raise RegistryError(f"fleet: GET {path} returned unexpected payload")
        return data

    async def _list(self, resource: str, key: str) -> list[dict[str, Any]]:
        """Fetch every page of a collection, following ``nextPageToken``."""
        items: list[dict[str, Any]] = []
        params = None

        while True:
            data = await self._get_json(f"/{resource}", params=params)
            items.extend(data.get(key) or [])

            token = data.get("nextPageToken")
            if not token:
                break
            logger.debug("Following fleet %s page token %s", resource, token)
            params = {"nextPageToken": token}

        return items

    async def machines(self) -> list[dict[str, Any]]:
        """List active machines."""
        return await self._list("machines", "machines")

    async def units(self) -> list[dict[str, Any]]:
        """List units with their desired and current states."""
        return await self._list("units", "units")

    async def unit_states(self) -> list[dict[str, Any]]:
        """List systemd states of scheduled units."""
        return await self._list("state", "states")

    async def close(self):
        """Close the HTTP client."""
        await self._client.aclose()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()
