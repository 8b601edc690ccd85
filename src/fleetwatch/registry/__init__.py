"""Registry access: fleet scheduler and etcd key-value store."""

from fleetwatch.registry.errors import PartialLookupFailure, RegistryError
from fleetwatch.registry.etcd import EtcdClient
from fleetwatch.registry.fleet import FleetClient
from fleetwatch.registry.gateway import RegistryGateway
from fleetwatch.registry.models import JobState, Machine, Unit, UnitOption, UnitState, unit_template

__all__ = [
    "RegistryGateway",
    "FleetClient",
    "EtcdClient",
    "RegistryError",
    "PartialLookupFailure",
    "Machine",
    "Unit",
    "UnitOption",
    "UnitState",
    "JobState",
    "unit_template",
]
