"""Tests for BaseService error conversion."""

import pytest

from cardclone.domain.errors import MalformedRecord, NotFound
from cardclone.domain.identity import parse_identity
from cardclone.infrastructure.chain import Chain
from cardclone.services.base import BaseService
from tests.conftest import ALICE, BOB


class TestBaseService:
    def test_chain_stored(self, chain: Chain) -> None:
        assert BaseService(chain)._chain is chain

    def test_resolve_caller_default(self, chain: Chain) -> None:
        assert BaseService(chain)._resolve_caller(None) == parse_identity(ALICE)

    def test_resolve_caller_explicit(self, chain: Chain) -> None:
        assert BaseService(chain)._resolve_caller(BOB) == parse_identity(BOB)


class TestFailure:
    def test_recoverable_error_becomes_result(self) -> None:
        result = BaseService._failure("show_card", NotFound("gone", token_id=3, raw=b"\x01"))
        assert result.ok is False
        assert result.op == "show_card"
        assert result.error is not None
        assert result.error.code == "NOT_FOUND"
        assert result.error.detail == {"token_id": 3, "raw": "b'\\x01'"}

    def test_fatal_error_propagates(self) -> None:
        with pytest.raises(MalformedRecord):
            BaseService._failure("show_card", MalformedRecord("bad image"))
