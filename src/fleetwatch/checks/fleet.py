"""Fleet cluster checks and metrics."""

import logging
import re
from collections import Counter

from fleetwatch.checks.registry import CheckDefinition, CheckRegistry
from fleetwatch.checks.results import CheckResult, count_points
from fleetwatch.checks.standard import StandardCheck
from fleetwatch.checks.thresholds import LessThan, Threshold
from fleetwatch.config.loader import ConfigError
from fleetwatch.config.schema import FleetwatchConfig
from fleetwatch.coordination.balancer import select_rebalance_candidates
from fleetwatch.coordination.consistency import ConsistencyChecker, resolve_concurrently
from fleetwatch.coordination.inventory import Inventory
from fleetwatch.registry.errors import RegistryError
from fleetwatch.registry.gateway import RegistryGateway

logger = logging.getLogger(__name__)


def compile_blacklist(pattern: str) -> re.Pattern:
    try:
        return re.compile(pattern)
    except re.error as e:
        raise ConfigError(f"Invalid blacklist pattern {pattern!r}: {e}") from e


class FleetChecks:
    """Checks over one registry gateway and configuration."""

    def __init__(self, gateway: RegistryGateway, config: FleetwatchConfig):
        self.gateway = gateway
        self.config = config
        self.cluster_size = StandardCheck(
            name="fleet-cluster-size",
            metric_name="fleet.cluster_size",
            fetch_value=self.fetch_cluster_size,
            threshold=Threshold(
                warning=config.cluster_size.warning,
                error=config.cluster_size.error,
                comparator=LessThan(),
            ),
            message=lambda size: f"The cluster size is {size:.0f}",
        )

    @property
    def lookup_timeout(self) -> float:
        return self.config.registry.timeout

    async def fetch_cluster_size(self) -> float:
        return float(len(await self.gateway.list_machines()))

    async def units_check(self) -> CheckResult:
        """Non-global units whose current state differs from the desired one."""
        units = await self.gateway.list_units()

        wrong = [u.name for u in units if u.desired_state != u.current_state and not u.is_global]

        if not wrong:
            return CheckResult.ok("fleet-units-checks", "Every unit is in its desired state")
        return CheckResult.warning(
            "fleet-units-checks", f"Units in an incoherent state: {','.join(wrong)}"
        )

    async def unit_states_check(self) -> CheckResult:
        """Units whose systemd state is failed, inactive or dead."""
        blacklist = compile_blacklist(self.config.unit_states.blacklist)
        states = await self.gateway.list_unit_states()

        failed = [s.name for s in states if not blacklist.search(s.name) and s.is_failed]

        if not failed:
            return CheckResult.ok("fleet-unit-states-checks", "Every unit is up and running")
        return CheckResult.warning("fleet-unit-states-checks", f"Failed units: {','.join(failed)}")

    async def machines_metrics(self) -> CheckResult:
        """Machine counts per role and per machine version."""
        try:
            machines = await self.gateway.list_machines()
        except RegistryError as e:
            logger.warning("fleet-machines-metrics: %s", e)
            return CheckResult.metric("fleet-machines-metrics", [])

        versions = await resolve_concurrently(
            [m.id for m in machines], self.gateway.machine_version, self.lookup_timeout
        )

        counts: Counter[str] = Counter()
        for machine in machines:
            counts["machines.all.all"] += 1
            roles = ["all"]
            if machine.role:
                counts[f"machines.{machine.role}.all"] += 1
                roles.append(machine.role)

            version = versions.get(machine.id)
            if version is None:
                continue
            for role in roles:
                counts[f"machines.{role}.{version}"] += 1

        return CheckResult.metric("fleet-machines-metrics", count_points(counts))

    async def units_metrics(self) -> CheckResult:
        """Unit counts per systemd sub-state, cluster-wide and per host."""
        try:
            states = await self.gateway.list_unit_states()
        except RegistryError as e:
            logger.warning("fleet-units-metrics: %s", e)
            return CheckResult.metric("fleet-units-metrics", [])

        hostnames = await resolve_concurrently(
            [s.machine_id for s in states if s.machine_id],
            self.gateway.hostname,
            self.lookup_timeout,
        )

        counts: Counter[str] = Counter()
        for state in states:
            counts["units.global.total"] += 1
            counts[f"units.global.{state.systemd_sub_state}"] += 1

            hostname = hostnames.get(state.machine_id)
            if hostname is None:
                continue
            counts[f"units.{hostname}.{state.systemd_sub_state}"] += 1
            counts[f"units.{hostname}.total"] += 1

        return CheckResult.metric("fleet-units-metrics", count_points(counts))

    async def balance_check(self) -> CheckResult:
        """Units that should move off overloaded machines."""
        blacklist = compile_blacklist(self.config.balancer.blacklist)
        machines_by_role, units_by_machine = await Inventory(self.gateway).build()

        candidates = select_rebalance_candidates(
            machines_by_role,
            units_by_machine,
            blacklist,
            self.config.balancer.overload_coefficient,
        )

        if not candidates:
            return CheckResult.ok("fleet-balance-check", "The cluster is balanced")
        return CheckResult.warning(
            "fleet-balance-check", f"Units to rebalance: {','.join(candidates)}"
        )

    async def consistency_check(self) -> CheckResult:
        """Machines with a persisted record that the scheduler does not see."""
        missing = await ConsistencyChecker(self.gateway, self.lookup_timeout).run()

        if not missing:
            return CheckResult.ok("fleet-consistency-check", "Every registered machine is active")
        return CheckResult.error(
            "fleet-consistency-check", f"Registered machines not active: {','.join(missing)}"
        )


def build_default_registry(checks: FleetChecks) -> CheckRegistry:
    """Register every fleet check under its public name."""
    registry = CheckRegistry()

    for definition in [
        CheckDefinition(
            "fleet-cluster-size-check",
            checks.cluster_size.check,
            "Cluster has enough active machines",
        ),
        CheckDefinition(
            "fleet-cluster-size-metric",
            checks.cluster_size.metric,
            "Number of active machines",
            kind="metric",
        ),
        CheckDefinition(
            "fleet-units-checks",
            checks.units_check,
            "Units are in their desired state",
        ),
        CheckDefinition(
            "fleet-unit-states-checks",
            checks.unit_states_check,
            "Units are running under systemd",
        ),
        CheckDefinition(
            "fleet-machines-metrics",
            checks.machines_metrics,
            "Machine counts by role and version",
            kind="metric",
        ),
        CheckDefinition(
            "fleet-units-metrics",
            checks.units_metrics,
            "Unit counts by state and host",
            kind="metric",
        ),
        CheckDefinition(
            "fleet-balance-check",
            checks.balance_check,
            "Units are spread evenly within each role",
        ),
        CheckDefinition(
            "fleet-consistency-check",
            checks.consistency_check,
            "Every registered machine is active",
        ),
    ]:
        registry.register(definition)

    return registry
