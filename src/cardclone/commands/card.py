"""Command group: query and transfer cloned cards."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from cardclone.commands._base import CardGroup

if TYPE_CHECKING:
    from cardclone.commands._context import AppContext


@click.group(
    cls=CardGroup,
    examples="""\
  cardclone card show 0xHANDLE
  cardclone card uri 0xHANDLE 0
  cardclone card transfer 0xHANDLE 0xRECIPIENT""",
)
def card() -> None:
    """Query or transfer a cloned card."""


@card.command("show", examples="  cardclone --json card show 0xHANDLE")
@click.argument("handle")
@click.pass_obj
def show(app: AppContext, handle: str) -> None:
    """Decode a card's metadata from its code image."""
    from cardclone.services.card import CardService

    app.emit(CardService(app.chain).show(handle))


@card.command("uri", examples="  cardclone card uri 0xHANDLE 0")
@click.argument("handle")
@click.argument("token_id", type=int)
@click.pass_obj
def uri(app: AppContext, handle: str, token_id: int) -> None:
    """Print the url of TOKEN_ID (fails unless it is the card's fixed id)."""
    from cardclone.services.card import CardService

    app.emit(CardService(app.chain).token_uri(handle, token_id))


@card.command("owner", examples="  cardclone card owner 0xHANDLE 1")
@click.argument("handle")
@click.argument("token_id", type=int)
@click.pass_obj
def owner(app: AppContext, handle: str, token_id: int) -> None:
    """Print the owner of TOKEN_ID."""
    from cardclone.services.card import CardService

    app.emit(CardService(app.chain).owner_of(handle, token_id))


@card.command("balance", examples="  cardclone card balance 0xHANDLE 0xIDENTITY")
@click.argument("handle")
@click.argument("identity")
@click.pass_obj
def balance(app: AppContext, handle: str, identity: str) -> None:
    """Print how many tokens of this card IDENTITY holds (0 or 1)."""
    from cardclone.services.card import CardService

    app.emit(CardService(app.chain).balance_of(handle, identity))


@card.command(
    "transfer",
    examples="""\
  cardclone card transfer 0xHANDLE 0xRECIPIENT
  cardclone card transfer 0xHANDLE 0xRECIPIENT --as 0xOWNER""",
)
@click.argument("handle")
@click.argument("to")
@click.option("--token-id", type=int, default=1, show_default=True, help="Token id to move.")
@click.option("--as", "caller", default=None, help="Caller identity (20-byte hex).")
@click.pass_obj
def transfer(app: AppContext, handle: str, to: str, token_id: int, caller: str | None) -> None:
    """Transfer a transferable card; only its owner may do this."""
    from cardclone.services.card import CardService

    app.emit(CardService(app.chain).transfer(handle, to, token_id, caller=caller))
