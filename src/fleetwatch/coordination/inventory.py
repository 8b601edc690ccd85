"""In-memory snapshot of machines by role and units by machine."""

from typing import NamedTuple

from fleetwatch.registry.gateway import RegistryGateway
from fleetwatch.registry.models import Machine, Unit


class InventorySnapshot(NamedTuple):
    """Machines grouped by role and units grouped by machine ID.

    Unpacks as ``machines_by_role, units_by_machine``.
    """

    machines_by_role: dict[str, list[Machine]]
    units_by_machine: dict[str, list[Unit]]


def group_by_role(machines: list[Machine]) -> dict[str, list[Machine]]:
    """Partition machines by role. Machines without a role form their own group."""
    groups: dict[str, list[Machine]] = {}
    for machine in machines:
        groups.setdefault(machine.role, []).append(machine)
    return groups


def group_by_machine(units: list[Unit]) -> dict[str, list[Unit]]:
    """Group units by the machine they are scheduled on, keeping registry order.

    Units not scheduled anywhere are left out.
    """
    groups: dict[str, list[Unit]] = {}
    for unit in units:
        if unit.machine_id:
            groups.setdefault(unit.machine_id, []).append(unit)
    return groups


class Inventory:
    """Builds a fresh snapshot from the registry on every call."""

    def __init__(self, gateway: RegistryGateway):
        self.gateway = gateway

    async def build(self) -> InventorySnapshot:
        """
        Read machines and units once and group them.

        Raises:
            RegistryError: If either listing fails; nothing partial is returned
        """
        machines = await self.gateway.list_machines()
        units = await self.gateway.list_units()
        return InventorySnapshot(group_by_role(machines), group_by_machine(units))
