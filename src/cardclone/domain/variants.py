"""Ownership variants for cloned cards.

- immutable: owner embedded in the code image, fixed id 0.
- transferable: owner kept in persistent slot 0, fixed id 1.

The sequential registry is not a clone variant; it lives in
:mod:`cardclone.services.registry`.
"""

from __future__ import annotations

from enum import StrEnum


class CardVariant(StrEnum):
    """How a clone stores its owner."""

    IMMUTABLE = "immutable"
    TRANSFERABLE = "transferable"

    @property
    def embeds_owner(self) -> bool:
        """Whether the owner is part of the code image."""
        return self is CardVariant.IMMUTABLE

    @property
    def fixed_token_id(self) -> int:
        """The single token id every clone of this variant represents."""
        return 0 if self is CardVariant.IMMUTABLE else 1

    @property
    def template_label(self) -> str:
        """Label the host derives this variant's template address from."""
        return f"template/{self.value}"


# Persistent slot holding the transferable owner.
OWNER_SLOT = 0
