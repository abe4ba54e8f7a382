"""CLI entry point for roundup."""

from pathlib import Path

import typer

from roundup.commands.admin import init_command
from roundup.commands.returns import returns_command
from roundup.commands.transactions import fail, filter_command, parse_command, validate_command
from roundup.config import load_settings
from roundup.domain.returns import Instrument
from roundup.logging_setup import configure_logging

app = typer.Typer(
    name="roundup",
    help="Round-up micro-savings calculator with temporal rules and return projections",
    add_completion=False,
)


@app.callback()
def main(
    ctx: typer.Context,
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    """Round-up micro-savings calculator."""
    level: str | None = "DEBUG" if verbose else None
    try:
        # init must still run when the existing config is broken
        if ctx.invoked_subcommand != "init":
            ctx.obj = load_settings()
            level = level or ctx.obj.log_level
        configure_logging(level)
    except ValueError as e:
        fail(ValueError(f"Invalid config: {e}"))


@app.command(name="init")
def init(
    force: bool = typer.Option(False, "--force", "-f", help="Overwrite existing config"),
) -> None:
    """Write the default configuration file."""
    init_command(force)


@app.command()
def parse(
    ctx: typer.Context,
    file: Path = typer.Argument(..., help="Expenses as JSON or CSV (timestamp, amount)"),
    as_json: bool = typer.Option(False, "--json", help="Print the raw JSON response"),
) -> None:
    """Compute ceilings and remanents for your expenses."""
    parse_command(file, as_json, ctx.obj)


@app.command()
def validate(
    ctx: typer.Context,
    file: Path = typer.Argument(..., help="JSON payload with wage and transactions"),
    as_json: bool = typer.Option(False, "--json", help="Print the raw JSON response"),
) -> None:
    """Validate transactions and report duplicates."""
    validate_command(file, as_json, ctx.obj)


@app.command(name="filter")
def filter_(
    ctx: typer.Context,
    file: Path = typer.Argument(..., help="JSON payload with transactions and q/p/k periods"),
    as_json: bool = typer.Option(False, "--json", help="Print the raw JSON response"),
) -> None:
    """Apply override, additive and aggregation periods."""
    filter_command(file, as_json, ctx.obj)


@app.command()
def returns(
    ctx: typer.Context,
    file: Path = typer.Argument(..., help="JSON payload with age, wage, inflation, transactions and q/p/k"),
    instrument: Instrument = typer.Option(Instrument.NPS, "--instrument", "-i", help="Investment vehicle"),
    as_json: bool = typer.Option(False, "--json", help="Print the raw JSON response"),
) -> None:
    """Project returns on your savings for each aggregation window."""
    returns_command(file, instrument, as_json, ctx.obj)


if __name__ == "__main__":
    app()
