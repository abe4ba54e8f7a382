"""Reading request payloads from JSON and CSV files."""

import json
from pathlib import Path
from typing import Any

import pandas as pd

from roundup.errors import InvalidRequestError


def load_payload(path: Path) -> Any:
    """Load a JSON payload file.

    Raises:
        InvalidRequestError: If the file is not valid JSON.
    """
    try:
        with open(path, encoding="utf-8") as f:
            return json.load(f)
    except json.JSONDecodeError as e:
        raise InvalidRequestError(f"Invalid JSON payload: {e}") from e


def load_expenses_csv(path: Path) -> list[dict[str, Any]]:
    """Load expenses from a CSV file with timestamp and amount columns.

    Every cell is read as text so amounts keep their exact decimal digits.

    Raises:
        InvalidRequestError: If a required column is missing.
    """
    frame = pd.read_csv(path, dtype=str, keep_default_na=False)
    frame.columns = [str(column).strip().lower() for column in frame.columns]

    missing = [column for column in ("timestamp", "amount") if column not in frame.columns]
    if missing:
        raise InvalidRequestError(f"CSV is missing column(s): {', '.join(missing)}")

    return frame[["timestamp", "amount"]].to_dict(orient="records")


def load_expenses(path: Path) -> dict[str, Any]:
    """Load an expenses payload from a JSON or CSV file.

    JSON may be a bare list of expenses or an object with an ``expenses`` key.
    """
    if path.suffix.lower() == ".csv":
        return {"expenses": load_expenses_csv(path)}

    payload = load_payload(path)
    if isinstance(payload, list):
        return {"expenses": payload}
    return payload
