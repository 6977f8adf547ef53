"""Fixed-width identities (20 bytes) and their hex text form.

Identities travel as raw ``bytes`` inside the domain and as ``0x``-prefixed
lowercase hex at the edges (CLI, service payloads, events).
"""

from __future__ import annotations

import hashlib
import re

from cardclone.domain.errors import InvalidIdentity

IDENTITY_LENGTH = 20
ZERO_IDENTITY = bytes(IDENTITY_LENGTH)

IDENTITY_PATTERN: re.Pattern[str] = re.compile(r"^(0x)?[0-9a-fA-F]{40}$")


def parse_identity(text: str) -> bytes:
    """Parse ``0x``-prefixed (or bare) hex into a 20-byte identity.

    Raises:
        InvalidIdentity: If *text* is not 40 hex characters.
    """
    if not IDENTITY_PATTERN.match(text.strip()):
        raise InvalidIdentity(f"Not a 20-byte hex identity: {text!r}", value=text)
    return bytes.fromhex(text.strip().removeprefix("0x"))


def format_identity(identity: bytes) -> str:
    """Render a 20-byte identity as lowercase ``0x`` hex."""
    return "0x" + require_identity(identity).hex()


def require_identity(identity: bytes) -> bytes:
    """Return *identity* unchanged if it is exactly 20 bytes."""
    if len(identity) != IDENTITY_LENGTH:
        raise InvalidIdentity(
            f"Identity must be {IDENTITY_LENGTH} bytes, got {len(identity)}",
            length=len(identity),
        )
    return bytes(identity)


def derive_address(deployer: bytes, nonce: int) -> bytes:
    """Derive a fresh 20-byte address from a deployer and its nonce.

    The last 20 bytes of SHA-256 over ``deployer ++ nonce``.
    """
    digest = hashlib.sha256(require_identity(deployer) + nonce.to_bytes(8, "big")).digest()
    return digest[-IDENTITY_LENGTH:]


def named_address(label: str) -> bytes:
    """Stable address for a well-known host account (e.g. a template)."""
    return hashlib.sha256(f"cardclone:{label}".encode()).digest()[-IDENTITY_LENGTH:]
