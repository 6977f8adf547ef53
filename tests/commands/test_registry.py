"""Tests for the registry command group."""

from __future__ import annotations

import json
from typing import Any

import pytest
from click.testing import CliRunner

from cardclone.cli import cli
from tests.conftest import BOB, CAROL


def _run(runner: CliRunner, *args: str) -> tuple[int, dict[str, Any]]:
    result = runner.invoke(cli, ["--json", *args])
    return result.exit_code, json.loads(result.output)


@pytest.mark.usefixtures("_isolated_root")
class TestRegistryCommands:
    def test_info(self, cli_runner: CliRunner) -> None:
        _run(cli_runner, "claim", "registry", "ipfs://1")
        code, payload = _run(cli_runner, "registry", "info")
        assert code == 0
        assert payload["data"] == {"name": "Cards", "symbol": "CARD", "total_supply": 1}

    def test_show_unknown(self, cli_runner: CliRunner) -> None:
        code, payload = _run(cli_runner, "registry", "show", "5")
        assert code == 1
        assert payload["error"]["code"] == "NOT_FOUND"

    def test_transfer_and_holdings(self, cli_runner: CliRunner) -> None:
        _run(cli_runner, "claim", "registry", "ipfs://1", "--as", BOB)
        code, payload = _run(cli_runner, "registry", "transfer", "1", CAROL, "--as", BOB)
        assert code == 0
        assert payload["data"]["owner"] == CAROL
        _, held = _run(cli_runner, "registry", "holdings", CAROL)
        assert held["data"]["tokens"] == [1]

    def test_transfer_by_stranger(self, cli_runner: CliRunner) -> None:
        _run(cli_runner, "claim", "registry", "ipfs://1", "--as", BOB)
        code, payload = _run(cli_runner, "registry", "transfer", "1", CAROL, "--from", BOB)
        assert code == 1
        assert payload["error"]["code"] == "NOT_AUTHORIZED"

    def test_config_names_collection(self, cli_runner: CliRunner, tmp_path: Any) -> None:
        (tmp_path / "cardclone.toml").write_text('[registry]\nname = "Gallery"\nsymbol = "GAL"\n')
        _, payload = _run(cli_runner, "registry", "info")
        assert payload["data"]["name"] == "Gallery"
        assert payload["data"]["symbol"] == "GAL"
