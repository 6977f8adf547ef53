"""Error taxonomy shared by every layer.

Each error carries a stable ``code`` that the service layer copies into
``ServiceError.code``. ``MalformedRecord`` is fatal: services never convert
it into a failed result, it always propagates to the caller.
"""

from __future__ import annotations


class CardError(Exception):
    """Base class for all cardclone errors."""

    code: str = "CARD_ERROR"
    fatal: bool = False

    def __init__(self, message: str, **detail: object) -> None:
        super().__init__(message)
        self.message = message
        self.detail = detail


class FieldTooLarge(CardError):
    """A name or symbol does not fit its one-byte length prefix."""

    code = "FIELD_TOO_LARGE"


class InvalidIdentity(CardError):
    """An identity is not exactly 20 bytes (or not valid hex)."""

    code = "INVALID_IDENTITY"


class DeployFailed(CardError):
    """The host could not materialize a code image."""

    code = "DEPLOY_FAILED"


class NotFound(CardError):
    """Query against an id or handle that does not exist."""

    code = "NOT_FOUND"


class NotAuthorized(CardError):
    """Transfer attempted by an identity that does not own the token."""

    code = "NOT_AUTHORIZED"


class NotSupported(CardError):
    """Operation disabled for this variant."""

    code = "NOT_SUPPORTED"


class UnsupportedFormat(CardError):
    """Image bytes match neither the JPEG nor the PNG signature."""

    code = "UNSUPPORTED_FORMAT"


class MalformedRecord(CardError):
    """A code image does not decode under the protocol constants."""

    code = "MALFORMED_RECORD"
    fatal = True
