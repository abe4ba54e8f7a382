"""Returns command for projecting savings growth."""

from pathlib import Path

from rich.console import Console
from rich.table import Table

from roundup.api import calculate_returns
from roundup.commands.payloads import load_payload
from roundup.commands.transactions import fail, print_json, render_totals, rupees
from roundup.config import DEFAULT_SETTINGS, Settings
from roundup.domain.returns import Instrument
from roundup.errors import RoundupError

console = Console()


def returns_command(
    file: Path,
    instrument: Instrument,
    as_json: bool = False,
    settings: Settings = DEFAULT_SETTINGS,
) -> None:
    """Project NPS or index fund returns for each aggregation window.

    Args:
        file: JSON payload with age, wage, inflation, transactions and q/p/k.
        instrument: Investment vehicle.
        as_json: Print the raw response instead of tables.
        settings: Limits and rates.
    """
    try:
        result = calculate_returns(load_payload(file), instrument, settings)
    except (RoundupError, OSError, ValueError) as e:
        fail(e, as_json)

    if as_json:
        print_json(result)
        return

    table = Table(title=f"Projected returns ({instrument.value})")
    table.add_column("Start", style="cyan")
    table.add_column("End", style="cyan")
    table.add_column("Invested", justify="right")
    table.add_column("Profits", justify="right", style="green")
    table.add_column("Tax benefit", justify="right")
    table.add_column("Real value", justify="right", style="bold")

    for window in result["savingsByDates"]:
        table.add_row(
            window["start"],
            window["end"],
            rupees(window["amount"]),
            rupees(window["profits"]),
            rupees(window["taxBenefit"]),
            rupees(window["realValue"]),
        )

    console.print(table)
    render_totals(result)
