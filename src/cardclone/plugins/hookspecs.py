"""Pluggy hook specifications for card lifecycle events.

Events are dispatched synchronously after the emitting transaction commits,
so external indexers only ever observe committed state.
"""

from __future__ import annotations

import pluggy

hookspec = pluggy.HookspecMarker("cardclone")


class CardcloneHookSpec:
    """Hook specifications for the cardclone plugin system."""

    @hookspec
    def card_claimed(
        self,
        name: str,
        symbol: str,
        handle: str,
        token_id: int,
    ) -> None:
        """Called once per successful card claim (the creation event)."""

    @hookspec
    def card_transferred(
        self,
        handle: str,
        token_id: int,
        previous_owner: str,
        new_owner: str,
    ) -> None:
        """Called after a transferable card changes owner."""

    @hookspec
    def registry_claimed(
        self,
        token_id: int,
        owner: str,
        url: str,
    ) -> None:
        """Called after a registry token is minted."""

    @hookspec
    def registry_transferred(
        self,
        token_id: int,
        previous_owner: str,
        new_owner: str,
    ) -> None:
        """Called after a registry token changes owner."""
