"""Tests for the data-URL service helper."""

from cardclone.domain.dataurl import PNG_SIGNATURE
from cardclone.services.media import data_url_result


class TestDataUrlResult:
    def test_png(self) -> None:
        image = PNG_SIGNATURE + b"rest"
        result = data_url_result(image)
        assert result.ok
        assert result.data["media_type"] == "image/png"
        assert result.data["size"] == len(image)
        assert result.data["url"].startswith("data:image/png;base64,")

    def test_unsupported(self) -> None:
        result = data_url_result(b"GIF89a")
        assert result.error is not None
        assert result.error.code == "UNSUPPORTED_FORMAT"
        assert result.error.detail["leading_bytes"] == b"GIF89a".hex()
