"""
Tree Command - Print the model hierarchy.

Renders System -> Container -> Component -> Code as a rich tree, marking
clones with the path to their original.
"""

import click
from rich.console import Console
from rich.tree import Tree

from ...config import load_config
from ...core.ancestry import ClonePathResolver
from ...core.types import Block, FlatC4Model
from ..utils import load_store, storage_options

console = Console()


def _label(block: Block, resolver: ClonePathResolver, kind: str) -> str:
    label = f"[cyan]{block.name}[/cyan] [dim]{kind} {block.id}[/dim]"
    if block.technology:
        label += f" [magenta]{block.technology}[/magenta]"
    if block.is_clone:
        path = resolver(block)
        label += f" [yellow]⧉ {path or block.original.name}[/yellow]"
    return label


def build_tree(model: FlatC4Model, resolver: ClonePathResolver, title: str = "📦 Model") -> Tree:
    """Tree of every block, children nested under their parents."""
    settings = load_config()
    root = Tree(f"[bold]{title}[/bold]")

    if not model.systems:
        root.add("[dim]No systems[/dim]")
        return root

    for system in model.systems:
        system_branch = root.add(_label(system, resolver, settings.label("system")))
        for container in model.containers:
            if container.system_id != system.id:
                continue
            container_branch = system_branch.add(_label(container, resolver, settings.label("container")))
            for component in model.components:
                if component.container_id != container.id:
                    continue
                component_branch = container_branch.add(
                    _label(component, resolver, settings.label("component"))
                )
                for code in model.code_elements:
                    if code.component_id == component.id:
                        component_branch.add(
                            _label(code, resolver, f"{settings.label('code')}:{code.code_type.value}")
                        )
    return root


@click.command()
@storage_options
def tree(db_path: str, storage_key: str):
    """
    Show the model as a tree.
    """
    store, storage = load_store(db_path, storage_key)
    console.print(build_tree(store.model, ClonePathResolver(store), title=f"📦 {storage.key}"))
