"""Command group: claim new cards (cloned or from the registry)."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import click

from cardclone.commands._base import CardGroup
from cardclone.domain.variants import CardVariant

if TYPE_CHECKING:
    from cardclone.commands._context import AppContext


@click.group(
    cls=CardGroup,
    examples="""\
  cardclone claim card "Card" CC ipfs://abc
  cardclone claim card "Card" CC --image art.png --variant transferable
  cardclone claim registry ipfs://abc""",
)
def claim() -> None:
    """Claim a new card."""


@claim.command(
    "card",
    examples="""\
  cardclone claim card "Card" CC ipfs://abc
  cardclone --json claim card "Card" CC ipfs://abc --variant transferable
  cardclone claim card "Card" CC --image art.png --as 0x1111111111111111111111111111111111111111""",
)
@click.argument("name")
@click.argument("symbol")
@click.argument("url", required=False)
@click.option(
    "--variant",
    type=click.Choice([v.value for v in CardVariant]),
    default=None,
    help="Ownership variant (default from [claim] config).",
)
@click.option(
    "--image",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="Use a JPEG/PNG file as the url (encoded as a data URL).",
)
@click.option("--as", "claimer", default=None, help="Claimer identity (20-byte hex).")
@click.pass_obj
def claim_card(
    app: AppContext,
    name: str,
    symbol: str,
    url: str | None,
    variant: str | None,
    image: Path | None,
    claimer: str | None,
) -> None:
    """Clone the template into a new card owned by the claimer."""
    from cardclone.services.claim import ClaimService
    from cardclone.services.media import data_url_result

    if (url is None) == (image is None):
        raise click.UsageError("Give exactly one of URL or --image.")

    if image is not None:
        media = data_url_result(image.read_bytes())
        if not media.ok:
            app.emit(media)
        url = media.data["url"]

    assert url is not None
    app.emit(ClaimService(app.chain).claim_card(name, symbol, url, variant=variant, claimer=claimer))


@claim.command(
    "registry",
    examples="""\
  cardclone claim registry ipfs://abc
  cardclone --json claim registry https://example.com/1.json""",
)
@click.argument("url")
@click.option("--as", "claimer", default=None, help="Claimer identity (20-byte hex).")
@click.pass_obj
def claim_registry(app: AppContext, url: str, claimer: str | None) -> None:
    """Mint the next sequential registry token."""
    from cardclone.services.registry import RegistryService

    app.emit(RegistryService(app.chain).claim(url, claimer=claimer))
