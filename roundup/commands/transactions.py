"""Transaction commands (parse, validate, filter)."""

import json
import sys
from pathlib import Path
from typing import Any, NoReturn

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from roundup.api import filter_transactions, parse_transactions, validate_transactions
from roundup.commands.payloads import load_expenses, load_payload
from roundup.config import DEFAULT_SETTINGS, Settings
from roundup.domain.money import format_money, parse_money
from roundup.errors import RoundupError

console = Console()


def print_json(data: Any) -> None:
    console.print_json(json.dumps(data))


def rupees(value: float) -> str:
    """Format a serialized two-decimal amount (e.g., "₹1,234.50")."""
    return f"₹{format_money(parse_money(value))}"


def render_transactions(title: str, transactions: list[dict[str, Any]]) -> None:
    """Render serialized transactions as a table."""
    table = Table(title=title)
    table.add_column("Timestamp", style="cyan")
    table.add_column("Amount", justify="right")
    table.add_column("Ceiling", justify="right")
    table.add_column("Remanent", justify="right")
    table.add_column("Final", justify="right", style="green")

    for txn in transactions:
        table.add_row(
            txn["timestamp"],
            rupees(txn["amount"]),
            rupees(txn["ceiling"]),
            rupees(txn["remanentBase"]),
            rupees(txn["remanentFinal"]),
        )

    console.print(table)


def render_rejections(rejections: list[dict[str, Any]]) -> None:
    if not rejections:
        return

    table = Table(title="Rejected")
    table.add_column("Code", style="red")
    table.add_column("Message")

    for rejection in rejections:
        table.add_row(rejection["code"], rejection["message"])

    console.print(table)


def render_totals(result: dict[str, Any]) -> None:
    console.print(f"  Total amount:   {rupees(result['transactionsTotalAmount'])}")
    console.print(f"  Total ceiling:  {rupees(result['transactionsTotalCeiling'])}")
    console.print(f"  Total remanent: [green]{rupees(result['transactionsTotalRemanent'])}[/green]")


def render_windows(windows: list[dict[str, Any]]) -> None:
    if not windows:
        return

    table = Table(title="Savings by window")
    table.add_column("Start", style="cyan")
    table.add_column("End", style="cyan")
    table.add_column("Amount", justify="right", style="green")

    for window in windows:
        table.add_row(window["start"], window["end"], rupees(window["amount"]))

    console.print(table)


def fail(error: Exception, as_json: bool = False) -> NoReturn:
    """Report an error and exit with status 1.

    Args:
        error: The error to report.
        as_json: Print the error body as JSON instead of a red message.
    """
    if as_json:
        if isinstance(error, RoundupError):
            print_json(error.to_payload())
        else:
            print_json({"error": str(error)})
    else:
        console.print(f"[red]Error: {escape(str(error))}[/red]", style="bold", soft_wrap=True)
    sys.exit(1)


def parse_command(file: Path, as_json: bool = False, settings: Settings = DEFAULT_SETTINGS) -> None:
    """Compute ceilings and remanents for an expenses file."""
    try:
        result = parse_transactions(load_expenses(file), settings)
    except (RoundupError, OSError, ValueError) as e:
        fail(e, as_json)

    if as_json:
        print_json(result)
        return

    render_transactions("Transactions", result["transactions"])
    render_totals(result)


def validate_command(file: Path, as_json: bool = False, settings: Settings = DEFAULT_SETTINGS) -> None:
    """Validate a transactions payload file."""
    try:
        result = validate_transactions(load_payload(file), settings)
    except (RoundupError, OSError, ValueError) as e:
        fail(e, as_json)

    if as_json:
        print_json(result)
        return

    render_transactions("Valid transactions", result["valid"])
    render_rejections(result["invalid"])

    if result["duplicates"]:
        console.print(f"[yellow]{len(result['duplicates'])} duplicate timestamp(s) found[/yellow]")


def filter_command(file: Path, as_json: bool = False, settings: Settings = DEFAULT_SETTINGS) -> None:
    """Apply q, p and k period rules from a payload file."""
    try:
        result = filter_transactions(load_payload(file), settings)
    except (RoundupError, OSError, ValueError) as e:
        fail(e, as_json)

    if as_json:
        print_json(result)
        return

    render_transactions("Transactions", result["valid"])
    render_rejections(result["invalid"])
    render_windows(result["savingsByDates"])
    render_totals(result)
