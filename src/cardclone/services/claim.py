"""ClaimService — the factory that turns a claim into a deployed clone.

Pipeline: VALIDATE → COMPOSE → DEPLOY → EVENT → RESPOND

A claim that fails validation never reaches the deploy primitive and
never emits an event. A failed deployment rolls back the whole
transaction, including the consumed nonce.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from cardclone.domain.codec import check_field_lengths, field_text
from cardclone.domain.compositor import compose, runtime_length
from cardclone.domain.errors import CardError, DeployFailed
from cardclone.domain.identity import format_identity
from cardclone.domain.variants import CardVariant
from cardclone.infrastructure.chain import Chain
from cardclone.services.base import BaseService
from cardclone.services.result import ServiceError, ServiceResult

if TYPE_CHECKING:
    from cardclone.infrastructure.chain import ChainTransaction

logger = logging.getLogger(__name__)


def claim(
    txn: ChainTransaction,
    claimer: bytes,
    name: bytes,
    symbol: bytes,
    url: bytes,
    variant: CardVariant,
) -> tuple[bytes, int]:
    """Deploy a new card and emit its creation event.

    Returns:
        ``(handle, token_id)`` of the new clone.

    Raises:
        FieldTooLarge: If *name* or *symbol* exceeds 255 bytes.
        DeployFailed: If the host returns no address.
    """
    check_field_lengths(name, symbol)

    init_code = compose(Chain.template_address(variant), claimer, name, symbol, url, variant)
    handle = txn.deploy(claimer, init_code)
    if handle is None:
        raise DeployFailed(
            f"Host could not deploy a {len(init_code)}-byte init code", variant=variant.value
        )

    token_id = variant.fixed_token_id
    txn.emit(
        "card_claimed",
        {
            "name": field_text(name),
            "symbol": field_text(symbol),
            "handle": format_identity(handle),
            "token_id": token_id,
        },
    )
    return handle, token_id


class ClaimService(BaseService):
    """Caller-facing entry point for claiming cards."""

    def claim_card(
        self,
        name: str,
        symbol: str,
        url: str,
        *,
        variant: str | None = None,
        claimer: str | None = None,
    ) -> ServiceResult:
        """Claim a new single-edition card owned by *claimer*."""
        op = "claim_card"

        # ── VALIDATE ──────────────────────────────────────────────
        variant_name = variant or self._chain.settings.claim.variant
        try:
            resolved = CardVariant(variant_name)
        except ValueError:
            return ServiceResult(
                ok=False,
                op=op,
                error=ServiceError(
                    code="UNKNOWN_VARIANT",
                    message=f"Unknown variant: {variant_name!r}. "
                    f"Expected one of {[v.value for v in CardVariant]}",
                ),
            )

        name_b, symbol_b, url_b = (s.encode("utf-8") for s in (name, symbol, url))

        # ── COMPOSE → DEPLOY → EVENT ──────────────────────────────
        try:
            claimer_id = self._resolve_caller(claimer)
            with self._chain.transaction() as txn:
                handle, token_id = claim(txn, claimer_id, name_b, symbol_b, url_b, resolved)
        except CardError as exc:
            return self._failure(op, exc)

        logger.info("Claimed %s card %s", resolved.value, format_identity(handle))

        # ── RESPOND ───────────────────────────────────────────────
        return ServiceResult(
            ok=True,
            op=op,
            data={
                "handle": format_identity(handle),
                "token_id": token_id,
                "variant": resolved.value,
                "owner": format_identity(claimer_id),
                "name": name,
                "symbol": symbol,
                "url": url,
                "code_length": runtime_length(name_b, symbol_b, url_b, resolved),
            },
        )
