"""Tests for the check registry."""

import pytest

from fleetwatch.checks.registry import CheckDefinition, CheckRegistry
from fleetwatch.checks.results import CheckResult, Verdict
from fleetwatch.config.loader import ConfigError
from fleetwatch.registry.errors import RegistryError


async def _ok():
    return CheckResult.ok("ok-check", "fine")


async def _registry_down():
    raise RegistryError("fleet: GET /machines failed")


async def _bad_config():
    raise ConfigError("Invalid blacklist pattern")


def test_register_and_get():
    registry = CheckRegistry()
    registry.register(CheckDefinition("ok-check", _ok, "Always fine"))

    assert registry.has("ok-check")
    assert registry.get("ok-check").description == "Always fine"
    assert registry.names == ["ok-check"]
    assert len(registry.list_checks()) == 1


def test_duplicate_registration_rejected():
    registry = CheckRegistry()
    registry.register(CheckDefinition("ok-check", _ok))

    with pytest.raises(ValueError):
        registry.register(CheckDefinition("ok-check", _ok))


def test_unknown_check():
    with pytest.raises(KeyError):
        CheckRegistry().get("nope")


def test_registries_are_independent():
    first = CheckRegistry()
    first.register(CheckDefinition("ok-check", _ok))
    assert not CheckRegistry().has("ok-check")


@pytest.mark.asyncio
async def test_run_returns_check_result():
    registry = CheckRegistry()
    registry.register(CheckDefinition("ok-check", _ok))

    result = await registry.run("ok-check")
    assert result.verdict == Verdict.OK


@pytest.mark.asyncio
@pytest.mark.parametrize("fn", [_registry_down, _bad_config])
async def test_run_turns_failures_into_error(fn):
    registry = CheckRegistry()
    registry.register(CheckDefinition("failing", fn))

    result = await registry.run("failing")

    assert result.verdict == Verdict.ERROR
    assert result.name == "failing"
    assert result.output
