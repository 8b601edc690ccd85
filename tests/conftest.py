"""Pytest configuration and shared fixtures."""

import pytest

from fleetwatch.config.schema import FleetwatchConfig
from fleetwatch.registry.models import Machine, UnitState
from tests.fakes import numbered_units


@pytest.fixture
def default_config() -> FleetwatchConfig:
    """Provide a default configuration for tests."""
    return FleetwatchConfig()


@pytest.fixture
def unbalanced_cluster():
    """One role: m1 runs 10 units, m2 runs 2."""
    machines = [Machine(id="m1", role="worker"), Machine(id="m2", role="worker")]
    units = numbered_units("m1", 10) + numbered_units("m2", 2, prefix="svc")
    return machines, units


@pytest.fixture
def sample_states() -> list[UnitState]:
    return [
        UnitState("web@1.service", "m1", systemd_active_state="active", systemd_sub_state="running"),
        UnitState("web@2.service", "m2", systemd_active_state="failed", systemd_sub_state="failed"),
        UnitState("db-backup.service", "m1", systemd_active_state="inactive", systemd_sub_state="dead"),
        UnitState("api.service", "m2", systemd_active_state="active", systemd_sub_state="running"),
    ]
