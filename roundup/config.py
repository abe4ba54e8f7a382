"""Configuration file management for roundup."""

import os
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import tomli_w

from roundup.domain.models import Money
from roundup.domain.money import parse_money
from roundup.domain.returns import INDEX_RATE, NPS_DEDUCTION_CAP, NPS_RATE
from roundup.errors import InvalidAmountError
from roundup.logging_setup import parse_level

DEFAULT_MAX_RECORDS = 1_000_000
DEFAULT_MAX_AMOUNT = "500000"


@dataclass(frozen=True)
class Settings:
    """Engine limits and projection rates."""

    max_records: int = DEFAULT_MAX_RECORDS
    max_amount: Money = Money(500_000 * 100)
    nps_rate: float = NPS_RATE
    index_rate: float = INDEX_RATE
    nps_deduction_cap: float = NPS_DEDUCTION_CAP
    log_level: str = "INFO"


DEFAULT_SETTINGS = Settings()


def get_xdg_config_home() -> Path:
    """Get XDG config directory, with fallback to ~/.config."""
    xdg_config = os.environ.get("XDG_CONFIG_HOME")
    if xdg_config:
        return Path(xdg_config)
    return Path.home() / ".config"


def get_config_path() -> Path:
    """Get the config file path (XDG compliant).

    Returns:
        Path to the config file.
    """
    return get_xdg_config_home() / "roundup" / "config.toml"


def default_config() -> dict[str, Any]:
    return {
        "limits": {
            "max_records": DEFAULT_MAX_RECORDS,
            "max_amount": DEFAULT_MAX_AMOUNT,
        },
        "returns": {
            "nps_rate": NPS_RATE,
            "index_rate": INDEX_RATE,
            "nps_deduction_cap": NPS_DEDUCTION_CAP,
        },
        "logging": {
            "level": "INFO",
        },
    }


def create_default_config(config_path: Path | None = None) -> None:
    """Create default config file with secure permissions.

    Args:
        config_path: Path to config file. If None, uses default location.
    """
    if config_path is None:
        config_path = get_config_path()

    config_path.parent.mkdir(parents=True, exist_ok=True)

    with open(config_path, "wb") as f:
        tomli_w.dump(default_config(), f)

    os.chmod(config_path, 0o600)


def load_config(config_path: Path | None = None) -> dict[str, Any]:
    """Load configuration from TOML file.

    Args:
        config_path: Path to config file. If None, uses default location.

    Returns:
        Configuration dictionary.

    Raises:
        FileNotFoundError: If config file doesn't exist.
    """
    if config_path is None:
        config_path = get_config_path()

    with open(config_path, "rb") as f:
        return tomllib.load(f)


def settings_from_config(config: dict[str, Any]) -> Settings:
    """Build Settings from a config dictionary, defaulting missing keys.

    Args:
        config: Parsed TOML configuration.

    Returns:
        Frozen Settings.

    Raises:
        ValueError: If a limit is not positive or the log level is unknown.
    """
    limits = config.get("limits", {})
    returns = config.get("returns", {})
    logging_section = config.get("logging", {})

    max_records = int(limits.get("max_records", DEFAULT_MAX_RECORDS))
    try:
        max_amount = parse_money(limits.get("max_amount", DEFAULT_MAX_AMOUNT))
    except InvalidAmountError as e:
        raise ValueError(f"limits.max_amount {e.message}") from e
    if max_records <= 0 or max_amount <= 0:
        raise ValueError("limits.max_records and limits.max_amount must be positive")

    log_level = str(logging_section.get("level", "INFO"))
    parse_level(log_level)

    return Settings(
        max_records=max_records,
        max_amount=max_amount,
        nps_rate=float(returns.get("nps_rate", NPS_RATE)),
        index_rate=float(returns.get("index_rate", INDEX_RATE)),
        nps_deduction_cap=float(returns.get("nps_deduction_cap", NPS_DEDUCTION_CAP)),
        log_level=log_level,
    )


def load_settings(config_path: Path | None = None) -> Settings:
    """Load Settings, falling back to defaults when no config file exists.

    Args:
        config_path: Path to config file. If None, uses default location.
    """
    try:
        config = load_config(config_path)
    except FileNotFoundError:
        return DEFAULT_SETTINGS
    return settings_from_config(config)
