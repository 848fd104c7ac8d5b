"""Command-line interface for guitarsleuth.

- commands: The Typer application and all subcommands.
- renderer: Rich tables and confidence meters for lookup and match results.
- console: Console context manager honouring ``--no-rich``.
"""

from guitarsleuth.cli.commands import app, main

__all__ = ["app", "main"]
