"""Admin commands for initializing configuration."""

import sys

from rich.console import Console

from roundup.config import create_default_config, get_config_path

console = Console()


def init_command(force: bool = False) -> None:
    """Write the default configuration file."""
    config_path = get_config_path()

    if config_path.exists() and not force:
        console.print(f"[yellow]Config already exists at {config_path}[/yellow]")
        console.print("[dim]Use --force to overwrite[/dim]")
        sys.exit(1)

    try:
        create_default_config(config_path)
    except OSError as e:
        console.print(f"[red]Failed to write config: {e}[/red]", style="bold")
        sys.exit(1)

    console.print(f"[green]✓[/green] Config written to: {config_path}")
    console.print("[dim]Edit [limits] and [returns] to change engine limits and rates[/dim]")
