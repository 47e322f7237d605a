"""
Search Command - Find blocks by name from a navigation position.
"""

import sys

import click
from rich.console import Console
from rich.table import Table

from ...core.search import search_entities
from ..utils import echo_error, echo_json, echo_warning, load_store, navigate, position_options, storage_options

console = Console()


@click.command()
@click.argument("query")
@position_options
@click.option("--json", "json_mode", is_flag=True, help="Output results as JSON")
@storage_options
def search(query: str, system_id: str, container_id: str, component_id: str,
           json_mode: bool, db_path: str, storage_key: str):
    """
    Search blocks whose name contains QUERY.

    Results leave out clones and the blocks already visible at the
    position given by --system/--container/--component.
    """
    store, _ = load_store(db_path, storage_key)

    result = navigate(store, system_id, container_id, component_id)
    if result.is_err():
        echo_error(f"Invalid position: {result.error}")
        sys.exit(1)

    results = search_entities(store.model, query)

    if json_mode:
        echo_json([block.to_wire() for block in results])
        return

    if not results:
        echo_warning(f"No blocks match '{query}'")
        return

    table = Table(show_header=True, header_style="bold")
    table.add_column("Name", style="cyan")
    table.add_column("Type")
    table.add_column("Id", style="dim")
    for block in results:
        table.add_row(block.name, block.type.value, block.id)
    console.print(table)
