"""Shared pytest fixtures and test helpers for cardclone tests."""

from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path
from typing import Any

import pluggy
import pytest
from click.testing import CliRunner
from sqlalchemy.engine import Engine

from cardclone.config.settings import CardSettings
from cardclone.infrastructure.chain import Chain
from cardclone.infrastructure.database.engine import init_database

hookimpl = pluggy.HookimplMarker("cardclone")

ALICE = "0x" + "a1" * 20
BOB = "0x" + "b0" * 20
CAROL = "0x" + "c4" * 20


class RecordingPlugin:
    """Plugin that records every lifecycle event it receives."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, dict[str, Any]]] = []

    @hookimpl
    def card_claimed(self, name: str, symbol: str, handle: str, token_id: int) -> None:
        self.calls.append(
            ("card_claimed", {"name": name, "symbol": symbol, "handle": handle, "token_id": token_id})
        )

    @hookimpl
    def card_transferred(
        self, handle: str, token_id: int, previous_owner: str, new_owner: str
    ) -> None:
        self.calls.append(
            (
                "card_transferred",
                {
                    "handle": handle,
                    "token_id": token_id,
                    "previous_owner": previous_owner,
                    "new_owner": new_owner,
                },
            )
        )

    @hookimpl
    def registry_claimed(self, token_id: int, owner: str, url: str) -> None:
        self.calls.append(("registry_claimed", {"token_id": token_id, "owner": owner, "url": url}))

    @hookimpl
    def registry_transferred(self, token_id: int, previous_owner: str, new_owner: str) -> None:
        self.calls.append(
            (
                "registry_transferred",
                {"token_id": token_id, "previous_owner": previous_owner, "new_owner": new_owner},
            )
        )

    def names(self) -> list[str]:
        return [name for name, _ in self.calls]


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def db_engine(tmp_path: Path) -> Iterator[Engine]:
    """Initialized SQLite engine with all tables created."""
    engine = init_database(tmp_path)
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture
def settings(tmp_path: Path) -> CardSettings:
    """Settings rooted at a temp directory, caller defaults to ALICE."""
    return CardSettings.from_cli(root=tmp_path, identity={"address": ALICE})


@pytest.fixture
def chain(settings: CardSettings) -> Iterator[Chain]:
    """Fully initialized chain on a temp directory (no event bus)."""
    c = Chain(settings)
    try:
        yield c
    finally:
        c.close()


@pytest.fixture
def recorder(chain: Chain) -> RecordingPlugin:
    """Attach an event bus with a recording plugin to ``chain``."""
    plugin = RecordingPlugin()
    bus = chain.init_event_bus(discover=False)
    bus.plugin_manager.register_plugin(plugin, name="recorder")
    return plugin


@pytest.fixture
def _isolated_root(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Change CWD to a temp root so the CLI creates an isolated ledger.

    Use via ``@pytest.mark.usefixtures("_isolated_root")`` on command test classes.
    """
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("CARDCLONE_CONFIG", raising=False)
