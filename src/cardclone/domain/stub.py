"""Template dispatch stub — the fixed 45-byte header of every clone.

A minimal delegating proxy: it forwards the full call input to the template
with delegated execution and returns the template's output verbatim. The
bytes after the stub are addressable through the clone's code image but are
never executed.

Header: [PREFIX(10) | TEMPLATE(20) | SUFFIX(15)] = 45 bytes.
Keep these constants stable. Every deployed clone depends on them.
"""

from __future__ import annotations

from cardclone.domain.errors import MalformedRecord
from cardclone.domain.identity import IDENTITY_LENGTH, require_identity

# calldatacopy; push template; delegatecall
STUB_PREFIX = bytes.fromhex("363d3d373d3d3d363d73")
# returndatacopy; return on success, revert on failure
STUB_SUFFIX = bytes.fromhex("5af43d82803e903d91602b57fd5bf3")

STUB_LENGTH = len(STUB_PREFIX) + IDENTITY_LENGTH + len(STUB_SUFFIX)
assert STUB_LENGTH == 45


def build_stub(template: bytes) -> bytes:
    """Return the stub forwarding every call to *template*."""
    return STUB_PREFIX + require_identity(template) + STUB_SUFFIX


def stub_target(code: bytes) -> bytes:
    """Extract the template address from a clone's code image.

    Raises:
        MalformedRecord: If *code* does not start with a well-formed stub.
    """
    if len(code) < STUB_LENGTH:
        raise MalformedRecord(
            f"Code image is {len(code)} bytes; shorter than the {STUB_LENGTH}-byte stub",
            code_length=len(code),
        )
    target_end = len(STUB_PREFIX) + IDENTITY_LENGTH
    if code[: len(STUB_PREFIX)] != STUB_PREFIX or code[target_end:STUB_LENGTH] != STUB_SUFFIX:
        raise MalformedRecord("Code image does not start with a dispatch stub")
    return bytes(code[len(STUB_PREFIX) : target_end])
