"""Metadata codec — the card record appended after the dispatch stub.

Layout (no padding, no delimiters)::

    [owner(20)]? | len(name)(1) | len(symbol)(1) | name | symbol | url

The owner field is present only when the variant embeds it in the code
image. The two one-byte length prefixes alone disambiguate ``name`` and
``symbol``; ``url`` consumes whatever remains.

INVARIANT: lengths are authoritative over content. Two records whose
``name ++ symbol`` concatenations coincide still decode to their original
split.

Fields are raw bytes. Text views use :func:`field_text`, which renders a
field that is not valid UTF-8 as ``0x`` hex rather than altering it.
"""

from __future__ import annotations

import struct
from dataclasses import dataclass

from cardclone.domain.errors import FieldTooLarge, MalformedRecord
from cardclone.domain.identity import IDENTITY_LENGTH, require_identity

LENGTH_PREFIX_FMT = ">BB"
LENGTH_PREFIX_LEN = struct.calcsize(LENGTH_PREFIX_FMT)  # 2
MAX_FIELD_LENGTH = 255


@dataclass(frozen=True)
class CardRecord:
    """One decoded card record."""

    owner: bytes | None
    name: bytes
    symbol: bytes
    url: bytes


def field_text(value: bytes) -> str:
    """Return *value* as UTF-8 text, or as ``0x`` hex if it is not valid UTF-8."""
    try:
        return value.decode("utf-8")
    except UnicodeDecodeError:
        return "0x" + value.hex()


def check_field_lengths(name: bytes, symbol: bytes) -> None:
    """Reject names or symbols that do not fit a one-byte length prefix.

    Raises:
        FieldTooLarge: If either field is longer than 255 bytes.
    """
    for field_name, value in (("name", name), ("symbol", symbol)):
        if len(value) > MAX_FIELD_LENGTH:
            raise FieldTooLarge(
                f"{field_name} is {len(value)} bytes; at most {MAX_FIELD_LENGTH} allowed",
                field=field_name,
                length=len(value),
            )


def payload_length(name: bytes, symbol: bytes, url: bytes, *, owner_embedded: bool) -> int:
    """Number of bytes :func:`encode` produces for these fields."""
    owner_len = IDENTITY_LENGTH if owner_embedded else 0
    return owner_len + LENGTH_PREFIX_LEN + len(name) + len(symbol) + len(url)


def encode(owner: bytes | None, name: bytes, symbol: bytes, url: bytes) -> bytes:
    """Encode a card record.

    Args:
        owner: 20-byte identity to embed, or None to omit the owner field.
        name: Card name, at most 255 bytes.
        symbol: Card symbol, at most 255 bytes.
        url: Pointer URL of any length.

    Raises:
        FieldTooLarge: If *name* or *symbol* exceeds 255 bytes.
        InvalidIdentity: If *owner* is given but is not 20 bytes.
    """
    check_field_lengths(name, symbol)
    prefix = require_identity(owner) if owner is not None else b""
    lengths = struct.pack(LENGTH_PREFIX_FMT, len(name), len(symbol))
    return b"".join((prefix, lengths, name, symbol, url))


def decode(buffer: bytes, skip_prefix_len: int, owner_embedded: bool) -> CardRecord:
    """Decode a card record from *buffer*, skipping a fixed-length prefix.

    Raises:
        MalformedRecord: If *buffer* is too short to hold the owner field,
            the length prefixes, or the declared name and symbol, or if
            *skip_prefix_len* is negative.
    """
    if skip_prefix_len < 0:
        raise MalformedRecord(
            f"Prefix length must not be negative, got {skip_prefix_len}",
            skip_prefix_len=skip_prefix_len,
        )
    offset = skip_prefix_len
    owner: bytes | None = None
    if owner_embedded:
        owner = bytes(buffer[offset : offset + IDENTITY_LENGTH])
        offset += IDENTITY_LENGTH

    if len(buffer) < offset + LENGTH_PREFIX_LEN:
        raise MalformedRecord(
            f"Record truncated: {len(buffer)} bytes, need {offset + LENGTH_PREFIX_LEN} "
            "for the owner field and length prefixes",
            buffer_length=len(buffer),
        )
    name_len, symbol_len = struct.unpack_from(LENGTH_PREFIX_FMT, buffer, offset)
    offset += LENGTH_PREFIX_LEN

    needed = offset + name_len + symbol_len
    if len(buffer) < needed:
        raise MalformedRecord(
            f"Record truncated: {len(buffer)} bytes, declared lengths need {needed}",
            buffer_length=len(buffer),
            name_length=name_len,
            symbol_length=symbol_len,
        )

    name = bytes(buffer[offset : offset + name_len])
    offset += name_len
    symbol = bytes(buffer[offset : offset + symbol_len])
    offset += symbol_len
    return CardRecord(owner=owner, name=name, symbol=symbol, url=bytes(buffer[offset:]))
