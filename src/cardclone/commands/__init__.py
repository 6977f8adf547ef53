"""Subcommand modules for cardclone.

Provides register_commands() which uses deferred imports to keep
``cardclone --help`` fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register all command groups and standalone commands on the root CLI group."""
    # --- Groups ---
    from cardclone.commands.card import card
    from cardclone.commands.claim import claim
    from cardclone.commands.registry import registry

    cli.add_command(claim)
    cli.add_command(card)
    cli.add_command(registry)

    # --- Standalone commands ---
    from cardclone.commands.dataurl import dataurl

    cli.add_command(dataurl)
