"""Shared card template — the behaviour every clone forwards to.

One :class:`CardTemplate` exists per variant. The host runs it with the
*clone's* context (its own code image and storage), so a single template
serves every clone of that variant. All reads start from the same step:
decode the clone's own code image after the stub.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any, Protocol

from cardclone.domain import codec
from cardclone.domain.errors import InvalidIdentity, NotAuthorized, NotFound, NotSupported
from cardclone.domain.identity import (
    IDENTITY_LENGTH,
    ZERO_IDENTITY,
    format_identity,
    require_identity,
)
from cardclone.domain.stub import STUB_LENGTH
from cardclone.domain.variants import OWNER_SLOT, CardVariant

logger = logging.getLogger(__name__)

# Interface discovery ids (ERC-165 selectors)
INTERFACE_DISCOVERY = 0x01FFC9A7
INTERFACE_TOKEN = 0x80AC58CD
INTERFACE_METADATA = 0x5B5E139F
INTERFACE_ENUMERABLE = 0x780E9D63

SUPPORTED_INTERFACES = frozenset(
    {INTERFACE_DISCOVERY, INTERFACE_TOKEN, INTERFACE_METADATA, INTERFACE_ENUMERABLE}
)

# Disabled in every clone variant (approval delegation is not offered).
DISABLED_METHODS = frozenset(
    {
        "approve",
        "get_approved",
        "set_approval_for_all",
        "is_approved_for_all",
        "transfer_from",
        "safe_transfer_from",
    }
)


class CallContext(Protocol):
    """What a template sees while serving a forwarded call."""

    address: bytes
    caller: bytes

    def own_code(self) -> bytes: ...

    def load_slot(self, slot: int) -> bytes: ...

    def store_slot(self, slot: int, value: bytes) -> None: ...

    def emit(self, hook_name: str, payload: dict[str, Any]) -> None: ...


class CardTemplate:
    """Token behaviour shared by all clones of one variant."""

    def __init__(self, variant: CardVariant) -> None:
        self.variant = variant
        self.fixed_token_id = variant.fixed_token_id
        self._handlers: dict[str, Callable[..., Any]] = {
            "name": self.name,
            "symbol": self.symbol,
            "token_uri": self.token_uri,
            "owner": self.owner,
            "owner_of": self.owner_of,
            "balance_of": self.balance_of,
            "total_supply": self.total_supply,
            "token_by_index": self.token_by_index,
            "token_of_owner_by_index": self.token_of_owner_by_index,
            "supports_interface": self.supports_interface,
            "record": self.record,
            "variant": self.variant_name,
            "transfer": self.transfer,
        }

    def execute(self, ctx: CallContext, method: str, *args: Any) -> Any:
        """Dispatch one forwarded call."""
        if method in DISABLED_METHODS:
            raise NotSupported(f"{method} is not supported by {self.variant} cards", method=method)
        handler = self._handlers.get(method)
        if handler is None:
            raise NotSupported(f"Unknown method: {method!r}", method=method)
        return handler(ctx, *args)

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def record(self, ctx: CallContext) -> codec.CardRecord:
        """Decode this clone's card record from its own code image."""
        code = ctx.own_code()
        decoded = codec.decode(code, STUB_LENGTH, self.variant.embeds_owner)
        if self.variant.embeds_owner:
            return decoded
        return codec.CardRecord(
            owner=self._slot_owner(ctx),
            name=decoded.name,
            symbol=decoded.symbol,
            url=decoded.url,
        )

    def variant_name(self, ctx: CallContext) -> str:
        return self.variant.value

    def name(self, ctx: CallContext) -> str:
        return codec.field_text(self.record(ctx).name)

    def symbol(self, ctx: CallContext) -> str:
        return codec.field_text(self.record(ctx).symbol)

    def token_uri(self, ctx: CallContext, token_id: int) -> str:
        self._require_fixed_id(token_id)
        return codec.field_text(self.record(ctx).url)

    def owner(self, ctx: CallContext) -> bytes:
        """Current owner: embedded in code, or read from the owner slot."""
        if self.variant.embeds_owner:
            owner = self.record(ctx).owner
            assert owner is not None
            return owner
        return self._slot_owner(ctx)

    def owner_of(self, ctx: CallContext, token_id: int) -> bytes:
        self._require_fixed_id(token_id)
        return self.owner(ctx)

    def balance_of(self, ctx: CallContext, identity: bytes) -> int:
        return 1 if require_identity(identity) == self.owner(ctx) else 0

    def total_supply(self, ctx: CallContext) -> int:
        return 1

    def token_by_index(self, ctx: CallContext, index: int) -> int:
        if index != 0:
            raise NotFound(f"Index {index} out of range; supply is 1", index=index)
        return self.fixed_token_id

    def token_of_owner_by_index(self, ctx: CallContext, owner: bytes, index: int) -> int:
        if index != 0 or require_identity(owner) != self.owner(ctx):
            raise NotFound(
                f"{format_identity(owner)} holds no token at index {index}", index=index
            )
        return self.fixed_token_id

    def supports_interface(self, ctx: CallContext, interface_id: int) -> bool:
        return interface_id in SUPPORTED_INTERFACES

    # ------------------------------------------------------------------
    # Transfer (transferable variant only)
    # ------------------------------------------------------------------

    def transfer(self, ctx: CallContext, to: bytes, token_id: int) -> None:
        """Move ownership to *to*; only the current owner may call this."""
        if self.variant.embeds_owner:
            raise NotSupported("Immutable cards cannot be transferred", method="transfer")
        self._require_fixed_id(token_id)

        current = self._slot_owner(ctx)
        if ctx.caller != current:
            raise NotAuthorized(
                f"{format_identity(ctx.caller)} does not own card {format_identity(ctx.address)}",
                caller=format_identity(ctx.caller),
            )

        to = require_identity(to)
        if to == ZERO_IDENTITY:
            raise InvalidIdentity("Cannot transfer to the zero identity")

        ctx.store_slot(OWNER_SLOT, to.rjust(32, b"\x00"))
        logger.debug("Card %s transferred to %s", ctx.address.hex(), to.hex())
        ctx.emit(
            "card_transferred",
            {
                "handle": format_identity(ctx.address),
                "token_id": self.fixed_token_id,
                "previous_owner": format_identity(current),
                "new_owner": format_identity(to),
            },
        )

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _require_fixed_id(self, token_id: int) -> None:
        if token_id != self.fixed_token_id:
            raise NotFound(
                f"Token {token_id} does not exist; this card is token {self.fixed_token_id}",
                token_id=token_id,
            )

    def _slot_owner(self, ctx: CallContext) -> bytes:
        return ctx.load_slot(OWNER_SLOT)[-IDENTITY_LENGTH:]
