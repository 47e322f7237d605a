"""
Import/Export Commands - Move JSON snapshots in and out of storage.

Snapshots use the editor's camelCase wire format.
"""

import json
import sys
from pathlib import Path

import click
from pydantic import ValidationError

from ...core.types import FlatC4Model
from ..utils import echo_error, echo_info, echo_success, open_storage, storage_options


@click.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False))
@storage_options
def import_model(file: str, db_path: str, storage_key: str):
    """
    Load a JSON snapshot from FILE into storage.
    """
    try:
        model = FlatC4Model.model_validate_json(Path(file).read_text())
    except ValidationError as e:
        echo_error(f"Invalid model in {file}: {e.error_count()} errors")
        sys.exit(1)

    storage = open_storage(db_path, storage_key)
    storage.save_model(model)

    counts = [len(model.systems), len(model.containers), len(model.components), len(model.code_elements)]
    echo_success(f"Imported {sum(counts)} blocks into '{storage.key}'")
    echo_info(f"{counts[0]} systems, {counts[1]} containers, {counts[2]} components, {counts[3]} code elements")


@click.command()
@click.argument("file", type=click.Path(dir_okay=False))
@storage_options
def export_model(file: str, db_path: str, storage_key: str):
    """
    Write the stored model to FILE as JSON.
    """
    storage = open_storage(db_path, storage_key)
    model = storage.load_model()
    if model is None:
        echo_error(f"Nothing stored under '{storage.key}'")
        sys.exit(1)

    Path(file).write_text(json.dumps(model.to_wire(), indent=2))
    echo_success(f"Exported '{storage.key}' to {file}")
