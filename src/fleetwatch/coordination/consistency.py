"""Reconcile active scheduler machines against persisted machine records."""

import asyncio
import logging
from collections.abc import Awaitable, Callable, Iterable

from fleetwatch.registry.errors import RegistryError
from fleetwatch.registry.gateway import RegistryGateway
from fleetwatch.registry.models import Machine

logger = logging.getLogger(__name__)

DEFAULT_LOOKUP_TIMEOUT = 5.0


def machine_id_from_key(key: str) -> str:
    """Trailing path segment of a registry key: ``/machines/abc`` -> ``abc``."""
    return key.rstrip("/").rsplit("/", 1)[-1]


async def resolve_concurrently(
    ids: Iterable[str],
    lookup: Callable[[str], Awaitable[str]],
    timeout: float = DEFAULT_LOOKUP_TIMEOUT,
) -> dict[str, str]:
    """
    Run ``lookup`` for every ID in parallel, each bounded by ``timeout``.

    A lookup that fails or times out is logged and left out of the result.
    Timed-out lookups are cancelled, which closes their pending request.

    Returns:
        ``{id: value}`` for the lookups that succeeded
    """
    resolved: dict[str, str] = {}
    lock = asyncio.Lock()

    async def worker(item: str) -> None:
        try:
            value = await asyncio.wait_for(lookup(item), timeout)
        except asyncio.TimeoutError:
            logger.warning("Lookup for %s timed out after %.1fs", item, timeout)
            return
        except RegistryError as e:
            logger.warning("Lookup for %s failed: %s", item, e)
            return

        async with lock:
            resolved[item] = value

    await asyncio.gather(*(worker(item) for item in dict.fromkeys(ids)))
    return resolved


class ConsistencyChecker:
    """
    Finds machines that have a persisted record but are not active in the
    scheduler.
    """

    def __init__(self, gateway: RegistryGateway, timeout: float = DEFAULT_LOOKUP_TIMEOUT):
        """
        Initialize checker.

        Args:
            gateway: Registry access
            timeout: Per-hostname lookup timeout in seconds
        """
        self.gateway = gateway
        self.timeout = timeout

    async def find_missing_machines(
        self, active_machines: list[Machine], registry_machine_keys: list[str]
    ) -> list[str]:
        """
        Hostnames of registered machines absent from ``active_machines``.

        Args:
            active_machines: Machines the scheduler reports as active
            registry_machine_keys: Keys under the machine namespace

        Returns:
            Hostnames in registry key order; IDs whose hostname cannot be
            resolved are dropped
        """
        active_ids = {machine.id for machine in active_machines}
        missing_ids = [
            machine_id
            for machine_id in dict.fromkeys(machine_id_from_key(k) for k in registry_machine_keys)
            if machine_id and machine_id not in active_ids
        ]
        if not missing_ids:
            return []

        logger.info("Registered machines not active: %s", ", ".join(missing_ids))
        hostnames = await resolve_concurrently(missing_ids, self.gateway.hostname, self.timeout)
        return [hostnames[machine_id] for machine_id in missing_ids if machine_id in hostnames]

    async def run(self, active_machines: list[Machine] | None = None) -> list[str]:
        """
        Read both views of cluster membership and reconcile them.

        Args:
            active_machines: Already-fetched active machines (e.g. from an
                inventory snapshot); listed from the scheduler when None

        Raises:
            RegistryError: If either listing fails
        """
        if active_machines is None:
            active_machines = await self.gateway.list_machines()
        keys = await self.gateway.list_machine_keys()
        return await self.find_missing_machines(active_machines, keys)
