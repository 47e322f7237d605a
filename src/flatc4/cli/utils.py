"""
CLI Utilities - Shared helper functions for command line operations.

This module provides common functionality used across commands, including
formatted printing, the shared storage options, and store loading.
"""

import json
from pathlib import Path
from typing import Any, Callable, Optional, Tuple

import click

from ..config import load_config
from ..core.navigation import NavigationController, NavigationTarget
from ..core.result import NavigationError, Result
from ..core.storage import SQLiteStorage
from ..core.store import FlatC4Store


def echo_success(message: str) -> None:
    """
    Print a success message with a green checkmark.

    Args:
        message (str): The message to display.
    """
    click.echo(click.style(f"✅ {message}", fg="green"))


def echo_error(message: str) -> None:
    """
    Print an error message with a red cross to stderr.

    Args:
        message (str): The error message to display.
    """
    click.echo(click.style(f"❌ {message}", fg="red"), err=True)


def echo_warning(message: str) -> None:
    click.echo(click.style(f"⚠️  {message}", fg="yellow"))


def echo_info(message: str) -> None:
    click.echo(click.style(f"   {message}", dim=True))


def echo_json(data: Any) -> None:
    click.echo(json.dumps(data, indent=2))


def storage_options(func: Callable) -> Callable:
    """Add the ``--db`` and ``--key`` options shared by every command."""
    func = click.option("-k", "--key", "storage_key", default=None,
                        help="Storage key of the diagram inside the database")(func)
    func = click.option("-d", "--db", "db_path", default=None,
                        help="SQLite database holding the model (default from config)")(func)
    return func


def open_storage(db_path: Optional[str], storage_key: Optional[str]) -> SQLiteStorage:
    """Open the SQLite storage named by the options, falling back to config."""
    settings = load_config()
    return SQLiteStorage(
        Path(db_path or settings.storage.path),
        key=storage_key or settings.storage.key,
    )


def load_store(db_path: Optional[str], storage_key: Optional[str]) -> Tuple[FlatC4Store, SQLiteStorage]:
    """
    Load the stored model into a fresh store.

    An empty or unreadable database yields an empty store.
    """
    storage = open_storage(db_path, storage_key)
    store = FlatC4Store()
    model = storage.load_model()
    if model is not None:
        store.set_model(model)
    return store, storage


def navigate(
    store: FlatC4Store,
    system_id: Optional[str],
    container_id: Optional[str],
    component_id: Optional[str],
) -> Result[NavigationTarget, NavigationError]:
    """
    Move the store to the deepest level the given ids reach.

    With no ids the store stays where it was saved.
    """
    controller = NavigationController(store)
    if component_id:
        return controller.navigate_to_code(system_id, container_id, component_id)
    if container_id:
        return controller.navigate_to_component(system_id, container_id)
    if system_id:
        return controller.navigate_to_container(system_id)
    return controller.navigate_to_view(
        store.model.view_level,
        store.model.active_system_id,
        store.model.active_container_id,
        store.model.active_component_id,
    )


def position_options(func: Callable) -> Callable:
    """Add ``--system``, ``--container`` and ``--component`` navigation options."""
    for name in ("component", "container", "system"):
        func = click.option(f"--{name}", f"{name}_id", default=None, help=f"Active {name} id")(func)
    return func
