"""
Clone Path Command - Show where a cloned block's original lives.
"""

import sys

import click

from ...core.ancestry import resolve_clone_path
from ..utils import echo_error, echo_info, load_store, storage_options


@click.command()
@click.argument("block_id")
@storage_options
def clone_path(block_id: str, db_path: str, storage_key: str):
    """
    Print the breadcrumb of the original behind clone BLOCK_ID.
    """
    store, _ = load_store(db_path, storage_key)

    block = store.get_block_by_id(block_id)
    if block is None:
        echo_error(f"No block with id: {block_id}")
        sys.exit(1)

    if not block.is_clone:
        echo_info(f"{block.name} is not a clone")
        return

    path = resolve_clone_path(block, store.model)
    if path is None:
        echo_info(f"Original of {block.name} cannot be shown")
        return
    click.echo(path)
