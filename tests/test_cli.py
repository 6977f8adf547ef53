"""Tests for the root cardclone CLI."""

import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from cardclone import __version__
from cardclone.cli import cli


def test_cli_help(cli_runner: CliRunner) -> None:
    result = cli_runner.invoke(cli, ["--help"])
    assert result.exit_code == 0
    assert "cardclone" in result.output


def test_cli_version(cli_runner: CliRunner) -> None:
    result = cli_runner.invoke(cli, ["--version"])
    assert result.exit_code == 0
    assert __version__ in result.output


def test_cli_no_args(cli_runner: CliRunner) -> None:
    result = cli_runner.invoke(cli, [])
    assert result.exit_code == 0
    assert "Usage" in result.output


# --- Global flags ---


def test_json_flag_accepted(cli_runner: CliRunner) -> None:
    result = cli_runner.invoke(cli, ["--json", "--version"])
    assert result.exit_code == 0


def test_quiet_flag_accepted(cli_runner: CliRunner) -> None:
    result = cli_runner.invoke(cli, ["-q", "--version"])
    assert result.exit_code == 0


@pytest.mark.usefixtures("_isolated_root")
def test_config_flag_sets_identity(cli_runner: CliRunner, tmp_path: Path) -> None:
    config = tmp_path / "elsewhere.toml"
    config.write_text('[identity]\naddress = "0x' + "c4" * 20 + '"\n')
    result = cli_runner.invoke(
        cli, ["--json", "-c", str(config), "claim", "card", "Card", "CC", "ipfs://abc"]
    )
    assert result.exit_code == 0
    assert json.loads(result.output)["data"]["owner"] == "0x" + "c4" * 20


@pytest.mark.usefixtures("_isolated_root")
def test_env_identity(cli_runner: CliRunner, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("CARDCLONE_IDENTITY__ADDRESS", "0x" + "b0" * 20)
    result = cli_runner.invoke(cli, ["--json", "claim", "registry", "ipfs://1"])
    assert json.loads(result.output)["data"]["owner"] == "0x" + "b0" * 20
