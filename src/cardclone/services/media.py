"""Image helpers exposed as a service result (no host access needed)."""

from __future__ import annotations

from cardclone.domain.dataurl import sniff_media_type, to_data_url
from cardclone.domain.errors import CardError
from cardclone.services.base import BaseService
from cardclone.services.result import ServiceResult


def data_url_result(image: bytes) -> ServiceResult:
    """Encode *image* as a data URL, or fail with ``UNSUPPORTED_FORMAT``."""
    op = "data_url"
    try:
        media_type = sniff_media_type(image)
        url = to_data_url(image)
    except CardError as exc:
        return BaseService._failure(op, exc)
    return ServiceResult(
        ok=True,
        op=op,
        data={"media_type": media_type, "size": len(image), "url": url},
    )
