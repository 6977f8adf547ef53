"""Command: encode a JPEG/PNG image as a data URL."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import click

from cardclone.commands._base import CardCommand

if TYPE_CHECKING:
    from cardclone.commands._context import AppContext


@click.command(
    cls=CardCommand,
    examples="""\
  cardclone dataurl art.png
  cardclone --json dataurl photo.jpg""",
)
@click.argument("image", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.pass_obj
def dataurl(app: AppContext, image: Path) -> None:
    """Print IMAGE as a data URL usable as a card url."""
    from cardclone.services.media import data_url_result

    app.emit(data_url_result(image.read_bytes()))
