"""Image-to-data-URL helper for card urls.

Recognizes JPEG and PNG by their leading signature bytes.
"""

from __future__ import annotations

import base64

from cardclone.domain.errors import UnsupportedFormat

JPEG_SIGNATURE = b"\xff\xd8\xff"
PNG_SIGNATURE = b"\x89PNG\r\n\x1a\n"

_SIGNATURES: tuple[tuple[bytes, str], ...] = (
    (JPEG_SIGNATURE, "image/jpeg"),
    (PNG_SIGNATURE, "image/png"),
)


def sniff_media_type(image: bytes) -> str:
    """Return the media type for *image*, or raise ``UnsupportedFormat``."""
    for signature, media_type in _SIGNATURES:
        if image.startswith(signature):
            return media_type
    raise UnsupportedFormat(
        "Image is neither JPEG nor PNG", leading_bytes=image[:8].hex()
    )


def to_data_url(image: bytes) -> str:
    """Encode *image* as a ``data:`` URL."""
    media_type = sniff_media_type(image)
    return f"data:{media_type};base64,{base64.b64encode(image).decode('ascii')}"
