"""Built-in audit plugin: one structured log line per lifecycle event."""

from __future__ import annotations

import pluggy
import structlog

hookimpl = pluggy.HookimplMarker("cardclone")

log = structlog.get_logger("cardclone.audit")


class AuditPlugin:
    """Logs every lifecycle event at INFO for external indexers."""

    @hookimpl
    def card_claimed(self, name: str, symbol: str, handle: str, token_id: int) -> None:
        log.info("card claimed", name=name, symbol=symbol, handle=handle, token_id=token_id)

    @hookimpl
    def card_transferred(
        self, handle: str, token_id: int, previous_owner: str, new_owner: str
    ) -> None:
        log.info(
            "card transferred",
            handle=handle,
            token_id=token_id,
            previous_owner=previous_owner,
            new_owner=new_owner,
        )

    @hookimpl
    def registry_claimed(self, token_id: int, owner: str, url: str) -> None:
        log.info("registry token claimed", token_id=token_id, owner=owner, url=url)

    @hookimpl
    def registry_transferred(self, token_id: int, previous_owner: str, new_owner: str) -> None:
        log.info(
            "registry token transferred",
            token_id=token_id,
            previous_owner=previous_owner,
            new_owner=new_owner,
        )
