"""Database engine setup for SQLite with WAL mode.

The host ledger is stored at {root}/.cardclone/chain.db.

SQLAlchemy Core (not ORM) is used because cardclone is a short-lived
CLI process — no benefit from session management or identity maps.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from sqlalchemy import create_engine, event, insert, select
from sqlalchemy.engine import Engine

from cardclone.infrastructure.database.schema import id_counters, metadata

DATA_DIRNAME = ".cardclone"
DB_FILENAME = "chain.db"

# counter -> first value handed out
COUNTER_SEEDS: dict[str, int] = {
    "deploy": 0,
    "registry": 1,
}


def create_db_engine(db_path: Path) -> Engine:
    """Create a SQLite engine with WAL mode and foreign keys enabled."""
    engine = create_engine(f"sqlite:///{db_path}", echo=False)

    @event.listens_for(engine, "connect")
    def _set_sqlite_pragma(dbapi_conn: Any, _: Any) -> None:
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA journal_mode=WAL")
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    return engine


def init_database(root: Path, *, data_dirname: str = DATA_DIRNAME) -> Engine:
    """Initialize the ledger at ``{root}/{data_dirname}/chain.db``.

    Creates the data directory, all tables from :data:`schema.metadata`,
    and seeds ``id_counters``.

    Idempotent — safe to call on an existing ledger.
    """
    data_dir = root / data_dirname
    data_dir.mkdir(parents=True, exist_ok=True)

    engine = create_db_engine(data_dir / DB_FILENAME)
    metadata.create_all(engine)
    _seed_counters(engine)
    return engine


def _seed_counters(engine: Engine) -> None:
    """Insert initial counter rows if they don't exist."""
    with engine.begin() as conn:
        for counter, first in COUNTER_SEEDS.items():
            row = conn.execute(
                select(id_counters.c.counter).where(id_counters.c.counter == counter)
            ).first()
            if row is None:
                conn.execute(insert(id_counters).values(counter=counter, next_value=first))
