"""
View Command - List the nodes and edges visible at a navigation position.
"""

import sys

import click
from rich.console import Console
from rich.table import Table

from ...config import load_config
from ...core.graph import EdgeCallbacks, FlatEdges, FlatNodes
from ..utils import echo_error, echo_info, echo_json, load_store, navigate, position_options, storage_options

console = Console()


@click.command()
@position_options
@click.option("--json", "json_mode", is_flag=True, help="Output nodes and edges as JSON")
@storage_options
def view(system_id: str, container_id: str, component_id: str,
         json_mode: bool, db_path: str, storage_key: str):
    """
    Show what the editor would draw at a position.
    """
    store, _ = load_store(db_path, storage_key)

    result = navigate(store, system_id, container_id, component_id)
    if result.is_err():
        echo_error(f"Invalid position: {result.error}")
        sys.exit(1)

    settings = load_config()
    nodes = FlatNodes(store).current_nodes
    edges = FlatEdges(store, EdgeCallbacks(get_technology_color=settings.technology_color)).edges

    if json_mode:
        echo_json({
            "level": store.model.view_level.value,
            "nodes": [node.to_wire() for node in nodes],
            "edges": [edge.to_wire() for edge in edges],
        })
        return

    level = store.model.view_level
    console.print(f"[bold]{settings.label(level.value)} view[/bold] ({len(nodes)} nodes, {len(edges)} edges)")
    if not nodes:
        echo_info("Nothing to show at this position")
        return

    node_table = Table(show_header=True, header_style="bold")
    node_table.add_column("Name", style="cyan")
    node_table.add_column("Id", style="dim")
    node_table.add_column("Position")
    for node in nodes:
        node_table.add_row(node.data["name"], node.id, f"({node.position.x:.0f}, {node.position.y:.0f})")
    console.print(node_table)

    if edges:
        edge_table = Table(show_header=True, header_style="bold")
        edge_table.add_column("Edge", style="cyan")
        edge_table.add_column("Label")
        edge_table.add_column("Technology")
        for edge in edges:
            edge_table.add_row(edge.id, edge.label or "", edge.data.technology or "")
        console.print(edge_table)
