"""
Reset Command - Wipe the stored model.
"""

import click

from ...core.actions import ModelActions
from ...core.store import FlatC4Store
from ..utils import echo_success, open_storage, storage_options


@click.command()
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
@storage_options
def reset(yes: bool, db_path: str, storage_key: str):
    """
    Delete the stored diagram and start from an empty model.
    """
    storage = open_storage(db_path, storage_key)
    if not yes:
        click.confirm(f"Delete the diagram stored under '{storage.key}'?", abort=True)

    store = FlatC4Store()
    ModelActions(store, storage).reset_store()
    echo_success(f"Reset '{storage.key}'")
