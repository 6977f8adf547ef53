"""Tests for the format_result dispatcher and OutputSettings."""

import json

from cardclone.output.console import create_console, get_output, style_for_key
from cardclone.output.formatters import OutputSettings, format_result
from cardclone.services.result import ServiceError, ServiceResult


def _ok(op: str = "test", **data: object) -> ServiceResult:
    return ServiceResult(ok=True, op=op, data=dict(data))


def _err(op: str = "test", msg: str = "fail") -> ServiceResult:
    return ServiceResult(ok=False, op=op, error=ServiceError(code="NOT_FOUND", message=msg))


class TestOutputSettings:
    def test_defaults(self) -> None:
        s = OutputSettings()
        assert s.json_output is False
        assert s.quiet is False
        assert s.verbose is False


class TestFormatResultJSON:
    def test_json_mode_returns_valid_json(self) -> None:
        output = format_result(_ok("claim_card", token_id=0), settings=OutputSettings(json_output=True))
        data = json.loads(output)
        assert data["ok"] is True
        assert data["op"] == "claim_card"
        assert data["data"]["token_id"] == 0

    def test_json_mode_error(self) -> None:
        output = format_result(_err(), settings=OutputSettings(json_output=True))
        assert json.loads(output)["error"]["code"] == "NOT_FOUND"


class TestFormatResultHuman:
    def test_error_line(self) -> None:
        assert format_result(_err("show_card", "No card")) == "ERROR: show_card [NOT_FOUND] No card"

    def test_quiet(self) -> None:
        assert format_result(_ok("claim_card", a=1), settings=OutputSettings(quiet=True)) == (
            "OK: claim_card"
        )

    def test_table_rows(self) -> None:
        output = format_result(_ok("show_card", handle="0xabc", url="ipfs://abc"))
        assert output.splitlines()[0].split() == ["OK", "show_card"]
        assert "handle" in output
        assert "0xabc" in output
        assert "ipfs://abc" in output

    def test_list_value_compact(self) -> None:
        output = format_result(_ok("registry_holdings", tokens=[1, 3]))
        assert "[1,3]" in output


class TestConsole:
    def test_buffer_roundtrip(self) -> None:
        console = create_console(no_color=True)
        console.print("hello")
        assert get_output(console) == "hello\n"

    def test_key_styles(self) -> None:
        assert style_for_key("owner") == "card.owner"
        assert style_for_key("token_id") == ""
