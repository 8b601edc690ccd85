"""Read-only facade over the scheduler and key-value registries."""

from fleetwatch.config.schema import RegistryConfig
from fleetwatch.registry.errors import RegistryError
from fleetwatch.registry.etcd import EtcdClient
from fleetwatch.registry.fleet import FleetClient
from fleetwatch.registry.models import Machine, Unit, UnitState


class RegistryGateway:
    """
    Single entry point for every registry read a check performs.

    Listings come from the fleet scheduler; per-machine records (hostname,
    version) live in etcd under ``/{namespace}/{machine_id}/``.
    """

    def __init__(self, fleet: FleetClient, etcd: EtcdClient, namespace: str = "machines"):
        self.fleet = fleet
        self.etcd = etcd
        self.namespace = namespace.strip("/")

    @classmethod
    def from_config(cls, config: RegistryConfig) -> "RegistryGateway":
        return cls(
            fleet=FleetClient(config.fleet_url, timeout=config.timeout),
            etcd=EtcdClient(config.etcd_url, timeout=config.timeout),
            namespace=config.namespace,
        )

    async def list_machines(self) -> list[Machine]:
        raw = await self.fleet.machines()
        try:
            return [Machine.from_api(m) for m in raw]
        except (KeyError, TypeError, AttributeError) as e:
            raise RegistryError(f"fleet: malformed machine record: {e}") from e

    async def list_units(self) -> list[Unit]:
        raw = await self.fleet.units()
        try:
            return [Unit.from_api(u) for u in raw]
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            raise RegistryError(f"fleet: malformed unit record: {e}") from e

    async def list_unit_states(self) -> list[UnitState]:
        raw = await self.fleet.unit_states()
        try:
            return [UnitState.from_api(s) for s in raw]
        except (KeyError, TypeError, AttributeError) as e:
            raise RegistryError(f"fleet: malformed unit state record: {e}") from e

    async def get(self, path: str) -> str:
        return await self.etcd.get(path)

    def machine_key(self, machine_id: str, leaf: str = "") -> str:
        key = f"/{self.namespace}/{machine_id}"
        return f"{key}/{leaf}" if leaf else key

    async def list_machine_keys(self) -> list[str]:
        """List the machine records persisted under the namespace."""
        return await self.etcd.list(f"/{self.namespace}")

    async def hostname(self, machine_id: str) -> str:
        return await self.get(self.machine_key(machine_id, "hostname"))

    async def machine_version(self, machine_id: str) -> str:
        return await self.get(self.machine_key(machine_id, "version"))

    async def close(self):
        """Close both registry clients."""
        await self.fleet.close()
        await self.etcd.close()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()
