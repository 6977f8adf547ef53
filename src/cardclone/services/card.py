"""CardService — read and transfer operations on deployed clones.

Every operation forwards through the clone's stub to its template, so the
clone's own code image stays the single source of truth.
"""

from __future__ import annotations

from typing import Any

from cardclone.domain.codec import field_text
from cardclone.domain.errors import CardError
from cardclone.domain.identity import format_identity, parse_identity
from cardclone.services.base import BaseService
from cardclone.services.result import ServiceResult


class CardService(BaseService):
    """Token-interface queries and the owner-authenticated transfer."""

    def show(self, handle: str) -> ServiceResult:
        """Full view of one card: metadata, owner, fixed id, variant."""
        op = "show_card"
        try:
            address = parse_identity(handle)
            caller = self._resolve_caller(None)
            with self._chain.transaction() as txn:
                record = txn.call(address, "record", caller=caller)
                token_id = txn.call(address, "token_by_index", 0, caller=caller)
                variant = txn.call(address, "variant", caller=caller)
        except CardError as exc:
            return self._failure(op, exc)

        assert record.owner is not None
        return ServiceResult(
            ok=True,
            op=op,
            data={
                "handle": format_identity(address),
                "token_id": token_id,
                "variant": variant,
                "owner": format_identity(record.owner),
                "name": field_text(record.name),
                "symbol": field_text(record.symbol),
                "url": field_text(record.url),
            },
        )

    def token_uri(self, handle: str, token_id: int) -> ServiceResult:
        return self._read("token_uri", handle, token_id, key="url", token_id=token_id)

    def owner_of(self, handle: str, token_id: int) -> ServiceResult:
        return self._read("owner_of", handle, token_id, key="owner", token_id=token_id)

    def balance_of(self, handle: str, identity: str) -> ServiceResult:
        op = "balance_of"
        try:
            who = parse_identity(identity)
        except CardError as exc:
            return self._failure(op, exc)
        return self._read(op, handle, who, key="balance", identity=format_identity(who))

    def transfer(
        self,
        handle: str,
        to: str,
        token_id: int,
        *,
        caller: str | None = None,
    ) -> ServiceResult:
        """Move a transferable card to *to*; the caller must own it."""
        op = "transfer_card"
        try:
            address = parse_identity(handle)
            recipient = parse_identity(to)
            sender = self._resolve_caller(caller)
            with self._chain.transaction() as txn:
                txn.call(address, "transfer", recipient, token_id, caller=sender)
        except CardError as exc:
            return self._failure(op, exc)

        return ServiceResult(
            ok=True,
            op=op,
            data={
                "handle": format_identity(address),
                "token_id": token_id,
                "previous_owner": format_identity(sender),
                "owner": format_identity(recipient),
            },
        )

    def invoke(
        self, handle: str, method: str, *args: Any, caller: str | None = None
    ) -> ServiceResult:
        """Forward an arbitrary token-interface call (used for rejections too)."""
        op = method
        try:
            address = parse_identity(handle)
            sender = self._resolve_caller(caller)
            with self._chain.transaction() as txn:
                value = txn.call(address, method, *args, caller=sender)
        except CardError as exc:
            return self._failure(op, exc)
        return ServiceResult(ok=True, op=op, data={"handle": handle, "result": _jsonable(value)})

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _read(self, method: str, handle: str, *args: Any, key: str, **extra: Any) -> ServiceResult:
        try:
            address = parse_identity(handle)
            caller = self._resolve_caller(None)
            with self._chain.transaction() as txn:
                value = txn.call(address, method, *args, caller=caller)
        except CardError as exc:
            return self._failure(method, exc)
        return ServiceResult(
            ok=True,
            op=method,
            data={"handle": format_identity(address), key: _jsonable(value), **extra},
        )


def _jsonable(value: Any) -> Any:
    """Render identities as hex so results serialize cleanly."""
    if isinstance(value, bytes):
        return format_identity(value)
    return value
