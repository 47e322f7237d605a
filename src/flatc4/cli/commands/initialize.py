"""
Init Command - Create a project configuration.
"""

from pathlib import Path

import click
from rich.console import Console
from rich.panel import Panel

from ...config import default_config_path, write_default_config

console = Console()


@click.command()
@click.option("--force", is_flag=True, help="Overwrite existing configuration")
def init(force: bool):
    """
    Initialize flatc4 in the current directory.

    Writes .flatc4/config.yaml with the default storage location,
    level labels and an empty technology colour map.
    """
    console.print(Panel.fit("🚀 [bold blue]flatc4 Initialization[/bold blue]", border_style="blue"))

    root_dir = Path.cwd()
    config_file = default_config_path(root_dir)
    if config_file.exists() and not force:
        console.print(f"[yellow]Configuration already exists at {config_file}[/yellow]")
        console.print("Use --force to overwrite it.")
        return

    written = write_default_config(root_dir)
    console.print("\n✨ [bold green]Initialized successfully![/bold green]")
    console.print(f"   Config created at: [dim]{written}[/dim]")
