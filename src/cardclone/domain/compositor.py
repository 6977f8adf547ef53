"""Clone compositor — builds the init code handed to the deploy primitive.

Init code layout::

    [owner-init(23)]? | copy-prologue(13) | stub(45) | payload

- owner-init (transferable only): ``PUSH20 claimer; RETURNDATASIZE; SSTORE``
  writes the claimer into slot 0 once, during deployment.
- copy-prologue: ``RETURNDATASIZE; PUSH4 len; DUP1; PUSH1 off;
  RETURNDATASIZE; CODECOPY; DUP2; RETURN`` returns the ``len`` bytes starting
  at ``off`` as the permanent code image.

The permanent code image is ``stub ++ payload``; the owner-init bytes are
never part of it.
"""

from __future__ import annotations

from cardclone.domain import codec
from cardclone.domain.identity import require_identity
from cardclone.domain.stub import STUB_LENGTH, build_stub
from cardclone.domain.variants import OWNER_SLOT, CardVariant

OP_STOP = 0x00
OP_CODECOPY = 0x39
OP_RETURNDATASIZE = 0x3D
OP_SSTORE = 0x55
OP_PUSH1 = 0x60
OP_PUSH4 = 0x63
OP_PUSH20 = 0x73
OP_DUP1 = 0x80
OP_DUP2 = 0x81
OP_RETURN = 0xF3

COPY_PROLOGUE_LENGTH = 13
OWNER_INIT_LENGTH = 23

assert OWNER_SLOT == 0  # owner-init pushes slot 0 with RETURNDATASIZE


def runtime_length(name: bytes, symbol: bytes, url: bytes, variant: CardVariant) -> int:
    """Length of the permanent code image for these fields."""
    return STUB_LENGTH + codec.payload_length(
        name, symbol, url, owner_embedded=variant.embeds_owner
    )


def copy_prologue(length: int, offset: int) -> bytes:
    """Prologue returning ``length`` bytes of init code starting at ``offset``."""
    return (
        bytes([OP_RETURNDATASIZE, OP_PUSH4])
        + length.to_bytes(4, "big")
        + bytes(
            [
                OP_DUP1,
                OP_PUSH1,
                offset,
                OP_RETURNDATASIZE,
                OP_CODECOPY,
                OP_DUP2,
                OP_RETURN,
            ]
        )
    )


def owner_init(claimer: bytes) -> bytes:
    """One-time sequence storing *claimer* in the owner slot."""
    return bytes([OP_PUSH20]) + require_identity(claimer) + bytes([OP_RETURNDATASIZE, OP_SSTORE])


def compose(
    template: bytes,
    claimer: bytes,
    name: bytes,
    symbol: bytes,
    url: bytes,
    variant: CardVariant,
) -> bytes:
    """Build the init code for a new clone of *template*.

    Raises:
        FieldTooLarge: If *name* or *symbol* exceeds 255 bytes.
        InvalidIdentity: If *template* or *claimer* is not 20 bytes.
    """
    codec.check_field_lengths(name, symbol)
    claimer = require_identity(claimer)

    if variant.embeds_owner:
        payload = codec.encode(claimer, name, symbol, url)
        init = b""
    else:
        payload = codec.encode(None, name, symbol, url)
        init = owner_init(claimer)

    runtime = build_stub(template) + payload
    prologue = copy_prologue(len(runtime), len(init) + COPY_PROLOGUE_LENGTH)
    return init + prologue + runtime
