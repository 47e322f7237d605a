"""
flatc4 CLI - Main entry point.

This module registers all CLI commands. Each command is implemented
in its own module under cli/commands/.
"""

import logging

import click

from .commands import clone_path, initialize, reset, search, transfer, tree, view


@click.group()
@click.version_option(package_name="flatc4")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
def main(verbose: bool):
    """flatc4: Flat C4 architecture model engine.

    Inspect, search and navigate a C4 diagram
    (System -> Container -> Component -> Code) stored in SQLite.

    \b
    Quick Start:
      flatc4 import diagram.json
      flatc4 tree
      flatc4 search payments --system sys-1
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(name)s %(message)s",
        datefmt="[%X]",
    )


# Register commands
main.add_command(initialize.init)
main.add_command(tree.tree)
main.add_command(search.search)
main.add_command(view.view)
main.add_command(clone_path.clone_path, name="clone-path")
main.add_command(transfer.import_model, name="import")
main.add_command(transfer.export_model, name="export")
main.add_command(reset.reset)

if __name__ == "__main__":
    main()
