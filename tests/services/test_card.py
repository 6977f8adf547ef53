"""Tests for CardService — reads and owner-authenticated transfer."""

from __future__ import annotations

import pytest
from sqlalchemy import select, update

from cardclone.domain.errors import MalformedRecord
from cardclone.domain.identity import parse_identity
from cardclone.domain.stub import STUB_LENGTH
from cardclone.domain.template import INTERFACE_METADATA, INTERFACE_TOKEN
from cardclone.infrastructure.chain import Chain
from cardclone.infrastructure.database.schema import accounts
from cardclone.services.card import CardService
from cardclone.services.claim import ClaimService
from tests.conftest import ALICE, BOB, CAROL, RecordingPlugin


def _claim(chain: Chain, variant: str = "immutable") -> str:
    result = ClaimService(chain).claim_card("Card", "CC", "ipfs://abc", variant=variant)
    assert result.ok
    return result.data["handle"]


class TestShow:
    def test_show_immutable(self, chain: Chain) -> None:
        handle = _claim(chain)
        result = CardService(chain).show(handle)
        assert result.ok
        assert result.data == {
            "handle": handle,
            "token_id": 0,
            "variant": "immutable",
            "owner": ALICE,
            "name": "Card",
            "symbol": "CC",
            "url": "ipfs://abc",
        }

    def test_show_transferable(self, chain: Chain) -> None:
        result = CardService(chain).show(_claim(chain, "transferable"))
        assert result.data["token_id"] == 1
        assert result.data["owner"] == ALICE

    def test_unknown_handle(self, chain: Chain) -> None:
        result = CardService(chain).show("0x" + "01" * 20)
        assert result.error is not None
        assert result.error.code == "NOT_FOUND"

    def test_bad_handle(self, chain: Chain) -> None:
        result = CardService(chain).show("0x1234")
        assert result.error is not None
        assert result.error.code == "INVALID_IDENTITY"

    def test_corrupt_image_propagates(self, chain: Chain) -> None:
        handle = _claim(chain)
        with chain.engine.begin() as conn:
            conn.execute(
                update(accounts)
                .where(accounts.c.address == handle)
                .values(code=b"\x00" * 10)
            )
        with pytest.raises(MalformedRecord):
            CardService(chain).show(handle)

    def test_truncated_payload_propagates(self, chain: Chain) -> None:
        handle = _claim(chain)
        with chain.engine.begin() as conn:
            # Keep the owner and length prefixes but cut "Card" short
            cut = STUB_LENGTH + 20 + 2 + 3
            code = conn.execute(
                select(accounts.c.code).where(accounts.c.address == handle)
            ).scalar_one()
            conn.execute(
                update(accounts).where(accounts.c.address == handle).values(code=code[:cut])
            )
        with pytest.raises(MalformedRecord, match="declared lengths"):
            CardService(chain).token_uri(handle, 0)


class TestQueries:
    def test_owner_of_wrong_id(self, chain: Chain) -> None:
        result = CardService(chain).owner_of(_claim(chain, "transferable"), 0)
        assert result.error is not None
        assert result.error.code == "NOT_FOUND"

    def test_balance_of_invalid_identity(self, chain: Chain) -> None:
        result = CardService(chain).balance_of(_claim(chain), "zz")
        assert result.error is not None
        assert result.error.code == "INVALID_IDENTITY"

    def test_invoke_enumeration(self, chain: Chain) -> None:
        cards = CardService(chain)
        handle = _claim(chain)
        assert cards.invoke(handle, "total_supply").data["result"] == 1
        assert cards.invoke(handle, "token_by_index", 0).data["result"] == 0
        owner = parse_identity(ALICE)
        assert cards.invoke(handle, "token_of_owner_by_index", owner, 0).data["result"] == 0
        assert cards.invoke(handle, "owner").data["result"] == ALICE

    def test_invoke_interfaces(self, chain: Chain) -> None:
        cards = CardService(chain)
        handle = _claim(chain)
        assert cards.invoke(handle, "supports_interface", INTERFACE_TOKEN).data["result"] is True
        assert cards.invoke(handle, "supports_interface", INTERFACE_METADATA).data["result"]
        assert cards.invoke(handle, "supports_interface", 0xFFFFFFFF).data["result"] is False

    @pytest.mark.parametrize("method", ["approve", "set_approval_for_all", "transfer_from"])
    def test_approval_methods_not_supported(self, chain: Chain, method: str) -> None:
        result = CardService(chain).invoke(_claim(chain, "transferable"), method)
        assert result.error is not None
        assert result.error.code == "NOT_SUPPORTED"


class TestTransfer:
    def test_owner_transfers(self, chain: Chain, recorder: RecordingPlugin) -> None:
        cards = CardService(chain)
        handle = _claim(chain, "transferable")
        result = cards.transfer(handle, BOB, 1)
        assert result.ok
        assert result.data["previous_owner"] == ALICE
        assert result.data["owner"] == BOB
        assert cards.owner_of(handle, 1).data["owner"] == BOB
        assert cards.balance_of(handle, ALICE).data["balance"] == 0
        assert recorder.names() == ["card_claimed", "card_transferred"]
        assert recorder.calls[-1][1] == {
            "handle": handle,
            "token_id": 1,
            "previous_owner": ALICE,
            "new_owner": BOB,
        }

    def test_chain_of_transfers(self, chain: Chain) -> None:
        cards = CardService(chain)
        handle = _claim(chain, "transferable")
        assert cards.transfer(handle, BOB, 1).ok
        assert cards.transfer(handle, CAROL, 1, caller=BOB).ok
        assert cards.owner_of(handle, 1).data["owner"] == CAROL

    def test_non_owner_rejected(self, chain: Chain, recorder: RecordingPlugin) -> None:
        cards = CardService(chain)
        handle = _claim(chain, "transferable")
        result = cards.transfer(handle, CAROL, 1, caller=BOB)
        assert result.error is not None
        assert result.error.code == "NOT_AUTHORIZED"
        assert cards.owner_of(handle, 1).data["owner"] == ALICE
        assert recorder.names() == ["card_claimed"]

    def test_previous_owner_loses_rights(self, chain: Chain) -> None:
        cards = CardService(chain)
        handle = _claim(chain, "transferable")
        cards.transfer(handle, BOB, 1)
        result = cards.transfer(handle, ALICE, 1)
        assert result.error is not None
        assert result.error.code == "NOT_AUTHORIZED"

    def test_wrong_token_id(self, chain: Chain) -> None:
        result = CardService(chain).transfer(_claim(chain, "transferable"), BOB, 0)
        assert result.error is not None
        assert result.error.code == "NOT_FOUND"

    def test_zero_recipient(self, chain: Chain) -> None:
        result = CardService(chain).transfer(_claim(chain, "transferable"), "0x" + "00" * 20, 1)
        assert result.error is not None
        assert result.error.code == "INVALID_IDENTITY"

    def test_immutable_not_transferable(self, chain: Chain) -> None:
        cards = CardService(chain)
        handle = _claim(chain)
        result = cards.transfer(handle, BOB, 0)
        assert result.error is not None
        assert result.error.code == "NOT_SUPPORTED"
        assert cards.owner_of(handle, 0).data["owner"] == ALICE

    def test_non_owner_to_zero_recipient(self, chain: Chain, recorder: RecordingPlugin) -> None:
        cards = CardService(chain)
        handle = _claim(chain, "transferable")
        result = cards.transfer(handle, "0x" + "00" * 20, 1, caller=BOB)
        assert result.error is not None
        assert result.error.code == "NOT_AUTHORIZED"
        assert cards.owner_of(handle, 1).data["owner"] == ALICE
        assert recorder.names() == ["card_claimed"]
