"""Command group: the sequential registry collection."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from cardclone.commands._base import CardGroup

if TYPE_CHECKING:
    from cardclone.commands._context import AppContext


@click.group(
    cls=CardGroup,
    examples="""\
  cardclone registry info
  cardclone registry show 1
  cardclone registry transfer 1 0xRECIPIENT""",
)
def registry() -> None:
    """Query or transfer registry tokens."""


@registry.command("info", examples="  cardclone --json registry info")
@click.pass_obj
def info(app: AppContext) -> None:
    """Collection name, symbol, and total supply."""
    from cardclone.services.registry import RegistryService

    app.emit(RegistryService(app.chain).summary())


@registry.command("show", examples="  cardclone registry show 1")
@click.argument("token_id", type=int)
@click.pass_obj
def show(app: AppContext, token_id: int) -> None:
    """Show the url and owner of TOKEN_ID."""
    from cardclone.services.registry import RegistryService

    app.emit(RegistryService(app.chain).show(token_id))


@registry.command(
    "transfer",
    examples="""\
  cardclone registry transfer 1 0xRECIPIENT
  cardclone registry transfer 1 0xRECIPIENT --as 0xOWNER""",
)
@click.argument("token_id", type=int)
@click.argument("to")
@click.option("--from", "from_", default=None, help="Current owner (defaults to the caller).")
@click.option("--as", "caller", default=None, help="Caller identity (20-byte hex).")
@click.pass_obj
def transfer(
    app: AppContext, token_id: int, to: str, from_: str | None, caller: str | None
) -> None:
    """Transfer TOKEN_ID to TO."""
    from cardclone.services.registry import RegistryService

    app.emit(RegistryService(app.chain).transfer(token_id, to, from_=from_, caller=caller))


@registry.command("holdings", examples="  cardclone registry holdings 0xIDENTITY")
@click.argument("identity")
@click.pass_obj
def holdings(app: AppContext, identity: str) -> None:
    """Balance of IDENTITY and the token ids it holds."""
    from cardclone.services.registry import RegistryService

    app.emit(RegistryService(app.chain).holdings(identity))
