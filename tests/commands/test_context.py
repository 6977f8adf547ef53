"""Tests for AppContext chain start-up and result emission."""

from __future__ import annotations

from pathlib import Path

import pytest
from click.testing import CliRunner
from sqlalchemy import select

from cardclone.cli import cli
from cardclone.infrastructure.database.engine import init_database
from cardclone.infrastructure.database.schema import event_log
from cardclone.plugins.event_bus import write_event


@pytest.mark.usefixtures("_isolated_root")
class TestStartup:
    def test_pending_events_redelivered(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        engine = init_database(tmp_path)
        try:
            with engine.begin() as conn:
                write_event(
                    conn, "registry_claimed", {"token_id": 1, "owner": "0x" + "a1" * 20, "url": "u"}
                )
        finally:
            engine.dispose()

        result = cli_runner.invoke(cli, ["registry", "info"])
        assert result.exit_code == 0

        engine = init_database(tmp_path)
        try:
            with engine.connect() as conn:
                status = conn.execute(select(event_log.c.status)).scalar_one()
        finally:
            engine.dispose()
        assert status == "completed"

    def test_help_does_not_create_ledger(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        cli_runner.invoke(cli, ["claim", "--help"])
        assert not (tmp_path / ".cardclone").exists()
