"""Tests for the dataurl command."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from cardclone.cli import cli
from cardclone.domain.dataurl import JPEG_SIGNATURE


@pytest.mark.usefixtures("_isolated_root")
class TestDataurl:
    def test_jpeg(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        image = tmp_path / "photo.jpg"
        image.write_bytes(JPEG_SIGNATURE + b"\xe0data")
        result = cli_runner.invoke(cli, ["--json", "dataurl", str(image)])
        assert result.exit_code == 0
        data = json.loads(result.output)["data"]
        assert data["media_type"] == "image/jpeg"
        assert data["url"].startswith("data:image/jpeg;base64,")

    def test_unsupported(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        image = tmp_path / "notes.txt"
        image.write_text("hello")
        result = cli_runner.invoke(cli, ["dataurl", str(image)])
        assert result.exit_code == 1
        assert "UNSUPPORTED_FORMAT" in result.output

    def test_missing_file(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["dataurl", "nope.png"])
        assert result.exit_code == 2
