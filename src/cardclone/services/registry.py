"""Sequential registry — the conventional, non-cloning card collection.

Token ids are handed out from the ``registry`` counter starting at 1; each
id maps to a url and an owner in the ``registry_tokens`` table. Name and
symbol are collection-wide constants from ``[registry]`` config. Transfers
follow the conventional rule (the current owner moves the token); approval
delegation is not offered.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from sqlalchemy import func, insert, select, update

from cardclone.domain.errors import CardError, InvalidIdentity, NotAuthorized, NotFound, NotSupported
from cardclone.domain.identity import ZERO_IDENTITY, format_identity, parse_identity
from cardclone.infrastructure.database.counters import next_value
from cardclone.infrastructure.database.schema import registry_tokens
from cardclone.services._helpers import now_iso
from cardclone.services.base import BaseService
from cardclone.services.result import ServiceResult

if TYPE_CHECKING:
    from cardclone.infrastructure.chain import ChainTransaction

logger = logging.getLogger(__name__)

DISABLED_METHODS = frozenset(
    {"approve", "get_approved", "set_approval_for_all", "is_approved_for_all"}
)


class SequentialRegistry:
    """Registry operations bound to one host transaction."""

    def __init__(self, txn: ChainTransaction) -> None:
        self._txn = txn
        self._conn = txn.conn

    def claim(self, claimer: bytes, url: str) -> int:
        """Mint the next id to *claimer* with *url*. Returns the id."""
        token_id = next_value(self._conn, "registry")
        self._conn.execute(
            insert(registry_tokens).values(
                token_id=token_id,
                url=url,
                owner=format_identity(claimer),
                created=now_iso(),
            )
        )
        self._txn.emit(
            "registry_claimed",
            {"token_id": token_id, "owner": format_identity(claimer), "url": url},
        )
        return token_id

    def token_uri(self, token_id: int) -> str:
        return self._row(token_id).url

    def owner_of(self, token_id: int) -> bytes:
        return parse_identity(self._row(token_id).owner)

    def balance_of(self, identity: bytes) -> int:
        return self._conn.execute(
            select(func.count())
            .select_from(registry_tokens)
            .where(registry_tokens.c.owner == format_identity(identity))
        ).scalar_one()

    def total_supply(self) -> int:
        return self._conn.execute(select(func.count()).select_from(registry_tokens)).scalar_one()

    def token_by_index(self, index: int) -> int:
        if index < 0:
            raise NotFound(f"Index {index} out of range", index=index)
        token_id = self._conn.execute(
            select(registry_tokens.c.token_id)
            .order_by(registry_tokens.c.token_id)
            .offset(index)
            .limit(1)
        ).scalar_one_or_none()
        if token_id is None:
            raise NotFound(f"Index {index} out of range", index=index)
        return token_id

    def token_of_owner_by_index(self, owner: bytes, index: int) -> int:
        if index < 0:
            raise NotFound(f"Index {index} out of range", index=index)
        token_id = self._conn.execute(
            select(registry_tokens.c.token_id)
            .where(registry_tokens.c.owner == format_identity(owner))
            .order_by(registry_tokens.c.token_id)
            .offset(index)
            .limit(1)
        ).scalar_one_or_none()
        if token_id is None:
            raise NotFound(
                f"{format_identity(owner)} holds no token at index {index}", index=index
            )
        return token_id

    def transfer_from(self, caller: bytes, from_: bytes, to: bytes, token_id: int) -> None:
        """Move *token_id* from *from_* to *to*; *caller* must be the owner."""
        owner = self.owner_of(token_id)
        if from_ != owner:
            raise NotAuthorized(
                f"Token {token_id} is not owned by {format_identity(from_)}", token_id=token_id
            )
        if caller != owner:
            raise NotAuthorized(
                f"{format_identity(caller)} does not own token {token_id}", token_id=token_id
            )
        if to == ZERO_IDENTITY:
            raise InvalidIdentity("Cannot transfer to the zero identity")

        self._conn.execute(
            update(registry_tokens)
            .where(registry_tokens.c.token_id == token_id)
            .values(owner=format_identity(to))
        )
        self._txn.emit(
            "registry_transferred",
            {
                "token_id": token_id,
                "previous_owner": format_identity(owner),
                "new_owner": format_identity(to),
            },
        )

    def _row(self, token_id: int) -> Any:
        row = self._conn.execute(
            select(registry_tokens.c.url, registry_tokens.c.owner).where(
                registry_tokens.c.token_id == token_id
            )
        ).first()
        if row is None:
            raise NotFound(f"Token {token_id} does not exist", token_id=token_id)
        return row


class RegistryService(BaseService):
    """Caller-facing registry operations returning ServiceResult."""

    def claim(self, url: str, *, claimer: str | None = None) -> ServiceResult:
        op = "claim_registry"
        try:
            owner = self._resolve_caller(claimer)
            with self._chain.transaction() as txn:
                token_id = SequentialRegistry(txn).claim(owner, url)
        except CardError as exc:
            return self._failure(op, exc)

        logger.info("Registry token %d claimed", token_id)
        return ServiceResult(
            ok=True,
            op=op,
            data={"token_id": token_id, "owner": format_identity(owner), "url": url},
        )

    def show(self, token_id: int) -> ServiceResult:
        op = "show_registry"
        try:
            with self._chain.transaction() as txn:
                registry = SequentialRegistry(txn)
                url = registry.token_uri(token_id)
                owner = registry.owner_of(token_id)
        except CardError as exc:
            return self._failure(op, exc)

        config = self._chain.settings.registry
        return ServiceResult(
            ok=True,
            op=op,
            data={
                "token_id": token_id,
                "name": config.name,
                "symbol": config.symbol,
                "owner": format_identity(owner),
                "url": url,
            },
        )

    def summary(self) -> ServiceResult:
        """Collection-wide name, symbol, and supply."""
        with self._chain.transaction() as txn:
            supply = SequentialRegistry(txn).total_supply()
        config = self._chain.settings.registry
        return ServiceResult(
            ok=True,
            op="registry_summary",
            data={"name": config.name, "symbol": config.symbol, "total_supply": supply},
        )

    def holdings(self, identity: str) -> ServiceResult:
        """Balance of *identity* plus its token ids in ascending order."""
        op = "registry_holdings"
        try:
            who = parse_identity(identity)
            with self._chain.transaction() as txn:
                registry = SequentialRegistry(txn)
                balance = registry.balance_of(who)
                tokens = [registry.token_of_owner_by_index(who, i) for i in range(balance)]
        except CardError as exc:
            return self._failure(op, exc)

        return ServiceResult(
            ok=True,
            op=op,
            data={"identity": format_identity(who), "balance": balance, "tokens": tokens},
        )

    def transfer(
        self,
        token_id: int,
        to: str,
        *,
        from_: str | None = None,
        caller: str | None = None,
    ) -> ServiceResult:
        op = "transfer_registry"
        try:
            sender = self._resolve_caller(caller)
            source = parse_identity(from_) if from_ else sender
            recipient = parse_identity(to)
            with self._chain.transaction() as txn:
                SequentialRegistry(txn).transfer_from(sender, source, recipient, token_id)
        except CardError as exc:
            return self._failure(op, exc)

        return ServiceResult(
            ok=True,
            op=op,
            data={
                "token_id": token_id,
                "previous_owner": format_identity(source),
                "owner": format_identity(recipient),
            },
        )

    def reject(self, method: str) -> ServiceResult:
        """Approval-style operations are not offered by the registry."""
        if method not in DISABLED_METHODS:
            msg = f"{method!r} is not an approval operation"
            raise ValueError(msg)
        return self._failure(
            method, NotSupported(f"{method} is not supported by the registry", method=method)
        )
