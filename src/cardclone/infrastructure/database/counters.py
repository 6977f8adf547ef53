"""Atomic sequential counters (deploy nonce, registry token ids).

The caller owns the transaction — pass a ``Connection`` obtained from
``engine.begin()`` so the counter increment participates in the same
atomic transaction as the surrounding writes. A rolled-back claim never
consumes an id.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import select, update

from cardclone.infrastructure.database.engine import COUNTER_SEEDS
from cardclone.infrastructure.database.schema import id_counters

if TYPE_CHECKING:
    from sqlalchemy import Connection


def next_value(conn: Connection, counter: str) -> int:
    """Claim the next value of *counter*.

    Args:
        conn: Active SQLAlchemy connection (caller owns the transaction).
        counter: One of ``"deploy"`` or ``"registry"``.

    Returns:
        The claimed value; the stored counter moves past it.

    Raises:
        ValueError: If *counter* is not a known counter.
    """
    if counter not in COUNTER_SEEDS:
        msg = f"Unknown counter: {counter!r}. Expected one of {sorted(COUNTER_SEEDS)}"
        raise ValueError(msg)

    current_value: int = conn.execute(
        select(id_counters.c.next_value).where(id_counters.c.counter == counter)
    ).scalar_one()

    conn.execute(
        update(id_counters)
        .where(id_counters.c.counter == counter)
        .values(next_value=current_value + 1)
    )
    return current_value
