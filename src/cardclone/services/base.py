"""BaseService — abstract foundation for all cardclone services.

Every service receives a :class:`Chain` at construction time. Services own
their transaction boundaries via ``self._chain.transaction()``.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from cardclone.domain.errors import CardError
from cardclone.domain.identity import parse_identity
from cardclone.services.result import ServiceError, ServiceResult

if TYPE_CHECKING:
    from cardclone.infrastructure.chain import Chain

logger = logging.getLogger(__name__)


class BaseService:
    """Abstract base for all service-layer classes.

    Usage::

        class ClaimService(BaseService):
            def claim_card(self, name: str, ...) -> ServiceResult:
                with self._chain.transaction() as txn:
                    ...
    """

    def __init__(self, chain: Chain) -> None:
        self._chain = chain

    def _resolve_caller(self, identity: str | None) -> bytes:
        """Parse *identity*, falling back to the configured default caller."""
        return parse_identity(identity or self._chain.settings.identity.address)

    @staticmethod
    def _failure(op: str, exc: CardError) -> ServiceResult:
        """Convert a recoverable error into a failed result.

        Fatal errors are re-raised: a malformed record means the protocol
        constants disagree with a deployed image, and no caller can recover.
        """
        if exc.fatal:
            raise exc
        logger.debug("%s failed: %s %s", op, exc.code, exc.message)
        detail = {k: v if isinstance(v, (str, int, bool)) else str(v) for k, v in exc.detail.items()}
        return ServiceResult(
            ok=False,
            op=op,
            error=ServiceError(code=exc.code, message=exc.message, detail=detail),
        )
