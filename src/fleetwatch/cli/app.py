"""Main CLI application using Typer."""

import typer
from rich.console import Console

from fleetwatch import __version__

app = typer.Typer(
    name="fleetwatch",
    help="Fleetwatch - Load balancing and consistency checks for fleet clusters",
    no_args_is_help=True,
)

console = Console()


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
):
    """Fleetwatch - Load balancing and consistency checks for fleet clusters."""
    from fleetwatch.cli.check_cmd import configure_logging

    configure_logging(verbose)


@app.command()
def version():
    """Show fleetwatch version."""
    console.print(f"fleetwatch version {__version__}")


@app.command("checks")
def checks():
    """List registered checks."""
    from fleetwatch.cli.check_cmd import list_checks_command

    list_checks_command()


@app.command()
def run(
    name: str = typer.Argument(..., help="Check name (see 'fleetwatch checks')"),
    config_path: str = typer.Option(
        None,
        "--config",
        "-c",
        help="Path to config file (default: /etc/fleetwatch/fleetwatch.yaml)",
    ),
):
    """Run a check and exit with its status (0 ok, 1 warning, 2 error)."""
    from fleetwatch.cli.check_cmd import run_check_command

    run_check_command(name, config_path=config_path)


@app.command()
def balance(
    config_path: str = typer.Option(None, "--config", "-c", help="Path to config file"),
):
    """Show overloaded machines and the units to migrate."""
    from fleetwatch.cli.check_cmd import balance_command

    balance_command(config_path=config_path)


@app.command()
def missing(
    config_path: str = typer.Option(None, "--config", "-c", help="Path to config file"),
):
    """Show machines registered in etcd but not active in fleet."""
    from fleetwatch.cli.check_cmd import missing_command

    missing_command(config_path=config_path)


if __name__ == "__main__":
    app()
