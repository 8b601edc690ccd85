"""Role-aware load balancing: find overloaded machines and pick units to move."""

import logging
import math
import re
from dataclasses import dataclass

from fleetwatch.registry.models import Machine, Unit

logger = logging.getLogger(__name__)

DEFAULT_OVERLOAD_COEFFICIENT = 1.3


@dataclass(frozen=True)
class OverloadRecord:
    """A machine carrying ``delta_units`` more units than its fair share."""

    machine_id: str
    delta_units: int


def find_overloaded_machines(
    machines_by_role: dict[str, list[Machine]],
    units_by_machine: dict[str, list[Unit]],
    overload_coefficient: float = DEFAULT_OVERLOAD_COEFFICIENT,
) -> list[OverloadRecord]:
    """
    Compare every machine to the average load of its role group.

    A machine's unit count is divided by ``overload_coefficient`` before
    subtracting the group average; the machine is overloaded when the
    floored difference is at least one.

    Returns:
        Overload records sorted by machine ID
    """
    records = []

    for role, machines in machines_by_role.items():
        if not machines:
            continue

        total_jobs = sum(len(units_by_machine.get(m.id, ())) for m in machines)
        average = total_jobs / len(machines)

        for machine in machines:
            load = len(units_by_machine.get(machine.id, ()))
            delta = math.floor(load / overload_coefficient - average)
            if delta >= 1:
                logger.debug(
                    "Machine %s (role %r) overloaded by %d: %d units, role average %.2f",
                    machine.id,
                    role,
                    delta,
                    load,
                    average,
                )
                records.append(OverloadRecord(machine.id, delta))

    return sorted(records, key=lambda r: r.machine_id)


def select_rebalance_candidates(
    machines_by_role: dict[str, list[Machine]],
    units_by_machine: dict[str, list[Unit]],
    blacklist: re.Pattern | None = None,
    overload_coefficient: float = DEFAULT_OVERLOAD_COEFFICIENT,
) -> list[str]:
    """
    Pick the units to migrate off overloaded machines.

    Overloaded machines are visited in machine ID order and their units in
    registry order. A unit is skipped if its name matches ``blacklist`` or
    if a unit with the same template was already picked anywhere in this
    pass. At most ``delta_units`` units are taken from each machine.

    Args:
        machines_by_role: Machines grouped by role
        units_by_machine: Units grouped by machine ID
        blacklist: Compiled pattern of units that must never move
        overload_coefficient: Load discount, at least 1

    Returns:
        Names of the units to migrate; empty when the cluster is balanced
    """
    if overload_coefficient < 1:
        raise ValueError(f"overload coefficient must be >= 1, got {overload_coefficient}")

    picked: list[str] = []
    picked_templates: set[str] = set()

    for record in find_overloaded_machines(
        machines_by_role, units_by_machine, overload_coefficient
    ):
        taken = 0
        for unit in units_by_machine.get(record.machine_id, ()):
            if taken >= record.delta_units:
                break
            if blacklist is not None and blacklist.search(unit.name):
                continue
            if unit.template in picked_templates:
                continue

            picked.append(unit.name)
            picked_templates.add(unit.template)
            taken += 1

    return picked
