"""CLI commands for running fleet checks."""

import asyncio
import logging
from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from fleetwatch.checks.fleet import FleetChecks, build_default_registry, compile_blacklist
from fleetwatch.checks.results import CheckResult, Verdict
from fleetwatch.config.loader import ConfigError, load_config
from fleetwatch.config.schema import FleetwatchConfig
from fleetwatch.coordination.balancer import find_overloaded_machines, select_rebalance_candidates
from fleetwatch.coordination.consistency import ConsistencyChecker
from fleetwatch.coordination.inventory import Inventory
from fleetwatch.registry.errors import RegistryError
from fleetwatch.registry.gateway import RegistryGateway

console = Console()

VERDICT_STYLES = {
    Verdict.OK: "green",
    Verdict.WARNING: "yellow",
    Verdict.ERROR: "red",
}


def configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _load(config_path: str | None) -> FleetwatchConfig:
    """Load config or exit with the error verdict's code."""
    try:
        if config_path:
            return load_config(Path(config_path))
        return load_config()
    except ConfigError as e:
        console.print(f"[red]Configuration error:[/red] {e}")
        raise typer.Exit(code=Verdict.ERROR.exit_code) from e


async def _async_list() -> list:
    config = FleetwatchConfig()
    async with RegistryGateway.from_config(config.registry) as gateway:
        return build_default_registry(FleetChecks(gateway, config)).list_checks()


def list_checks_command() -> None:
    """Show every registered check."""
    definitions = asyncio.run(_async_list())

    table = Table(title="Registered Checks")
    table.add_column("Name", style="cyan")
    table.add_column("Kind", style="magenta")
    table.add_column("Description", style="white")

    for definition in definitions:
        table.add_row(definition.name, definition.kind, definition.description)

    console.print(table)


async def _async_run(name: str, config_path: str | None = None) -> CheckResult:
    """Async implementation of a single check run."""
    config = _load(config_path)

    async with RegistryGateway.from_config(config.registry) as gateway:
        registry = build_default_registry(FleetChecks(gateway, config))
        if not registry.has(name):
            console.print(f"[red]Unknown check '{name}'[/red]")
            console.print(f"Available: {', '.join(registry.names)}")
            raise typer.Exit(code=Verdict.ERROR.exit_code)
        return await registry.run(name)


def run_check_command(name: str, config_path: str | None = None) -> None:
    """Run one check, print its output and exit with its verdict."""
    result = asyncio.run(_async_run(name, config_path))

    # Metric output goes out raw for the metric sink
    typer.echo(result.output)
    raise typer.Exit(code=result.exit_code)


async def _async_balance(config_path: str | None = None) -> None:
    """Async implementation of the rebalance report."""
    config = _load(config_path)
    blacklist = compile_blacklist(config.balancer.blacklist)

    async with RegistryGateway.from_config(config.registry) as gateway:
        try:
            machines_by_role, units_by_machine = await Inventory(gateway).build()
        except RegistryError as e:
            console.print(f"[red]Registry error:[/red] {e}")
            raise typer.Exit(code=Verdict.ERROR.exit_code) from e

    coefficient = config.balancer.overload_coefficient
    overloaded = find_overloaded_machines(machines_by_role, units_by_machine, coefficient)
    candidates = select_rebalance_candidates(
        machines_by_role, units_by_machine, blacklist, coefficient
    )

    table = Table(title="Machines by Role")
    table.add_column("Role", style="cyan")
    table.add_column("Machine", style="white")
    table.add_column("Units", style="yellow")
    table.add_column("Overload", style="red")

    deltas = {r.machine_id: r.delta_units for r in overloaded}
    for role, machines in sorted(machines_by_role.items()):
        for machine in machines:
            delta = deltas.get(machine.id)
            table.add_row(
                role or "-",
                machine.id,
                str(len(units_by_machine.get(machine.id, ()))),
                f"+{delta}" if delta else "-",
            )

    console.print(table)

    if not candidates:
        console.print("\n[green]✓[/green] The cluster is balanced")
        return

    console.print(f"\n[bold]Units to rebalance ({len(candidates)}):[/bold]")
    for name in candidates:
        console.print(f"  [yellow]{name}[/yellow]")


def balance_command(config_path: str | None = None) -> None:
    """Show overloaded machines and the units that should move."""
    asyncio.run(_async_balance(config_path))


async def _async_missing(config_path: str | None = None) -> None:
    """Async implementation of the missing machines report."""
    config = _load(config_path)

    async with RegistryGateway.from_config(config.registry) as gateway:
        try:
            missing = await ConsistencyChecker(gateway, config.registry.timeout).run()
        except RegistryError as e:
            console.print(f"[red]Registry error:[/red] {e}")
            raise typer.Exit(code=Verdict.ERROR.exit_code) from e

    if not missing:
        console.print("[green]✓[/green] Every registered machine is active")
        return

    console.print(f"[bold]Registered machines not active ({len(missing)}):[/bold]")
    for hostname in missing:
        console.print(f"  [red]{hostname}[/red]")
    raise typer.Exit(code=Verdict.ERROR.exit_code)


def missing_command(config_path: str | None = None) -> None:
    """Show machines that are registered but not active."""
    asyncio.run(_async_missing(config_path))
