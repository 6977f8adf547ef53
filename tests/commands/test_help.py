"""Parametrized help and --examples tests for all CLI commands."""

from __future__ import annotations

import pytest
from click.testing import CliRunner

from cardclone.cli import cli

# (CLI args, expected keywords in output)
HELP_COMMANDS: list[tuple[list[str], list[str]]] = [
    (["--help"], ["claim", "card", "registry", "dataurl", "--json", "--config"]),
    (["claim", "--help"], ["card", "registry"]),
    (["claim", "card", "--help"], ["NAME", "SYMBOL", "--variant", "--image", "--as"]),
    (["claim", "registry", "--help"], ["URL", "--as"]),
    (["card", "--help"], ["show", "uri", "owner", "balance", "transfer"]),
    (["card", "show", "--help"], ["HANDLE"]),
    (["card", "uri", "--help"], ["HANDLE", "TOKEN_ID"]),
    (["card", "owner", "--help"], ["TOKEN_ID"]),
    (["card", "balance", "--help"], ["IDENTITY"]),
    (["card", "transfer", "--help"], ["TO", "--token-id", "--as"]),
    (["registry", "--help"], ["info", "show", "transfer", "holdings"]),
    (["registry", "transfer", "--help"], ["TOKEN_ID", "--from", "--as"]),
    (["registry", "holdings", "--help"], ["IDENTITY"]),
    (["dataurl", "--help"], ["IMAGE"]),
]


class TestHelp:
    @pytest.mark.parametrize(
        ("args", "keywords"), HELP_COMMANDS, ids=[" ".join(a) for a, _ in HELP_COMMANDS]
    )
    def test_help(self, cli_runner: CliRunner, args: list[str], keywords: list[str]) -> None:
        result = cli_runner.invoke(cli, args)
        assert result.exit_code == 0, result.output
        for keyword in keywords:
            assert keyword in result.output

    def test_version(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert "0.1.0" in result.output


class TestExamples:
    @pytest.mark.parametrize(
        "args",
        [["claim"], ["claim", "card"], ["card", "transfer"], ["registry", "info"], ["dataurl"]],
    )
    def test_examples_flag(self, cli_runner: CliRunner, args: list[str]) -> None:
        result = cli_runner.invoke(cli, [*args, "--examples"])
        assert result.exit_code == 0
        assert "Examples for" in result.output
        assert "cardclone" in result.output
