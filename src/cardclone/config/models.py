"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, cardclone.toml only contains
overrides.
"""

from __future__ import annotations

from pydantic import BaseModel, Field, field_validator

from cardclone.domain.identity import IDENTITY_PATTERN, named_address
from cardclone.domain.variants import CardVariant


def _default_identity() -> str:
    return "0x" + named_address("identity/local").hex()


class ChainConfig(BaseModel):
    """[chain] section."""

    model_config = {"frozen": True}

    data_dirname: str = ".cardclone"
    max_init_steps: int = 1024


class IdentityConfig(BaseModel):
    """[identity] section — the caller used when ``--as`` is not given."""

    model_config = {"frozen": True}

    address: str = Field(default_factory=_default_identity)

    @field_validator("address")
    @classmethod
    def _check_address(cls, value: str) -> str:
        if not IDENTITY_PATTERN.match(value):
            msg = f"identity.address must be 20-byte hex, got {value!r}"
            raise ValueError(msg)
        return value.lower() if value.startswith("0x") else "0x" + value.lower()


class ClaimConfig(BaseModel):
    """[claim] section."""

    model_config = {"frozen": True}

    variant: CardVariant = CardVariant.IMMUTABLE


class RegistryConfig(BaseModel):
    """[registry] section — collection-wide constants."""

    model_config = {"frozen": True}

    name: str = "Cards"
    symbol: str = "CARD"
