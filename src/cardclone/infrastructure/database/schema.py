"""SQLAlchemy Core table definitions for the host ledger.

- ``accounts``: every address the host knows (templates and clones) with
  its permanent code image.
- ``storage_slots``: per-address persistent slots (32-byte values, hex).
- ``registry_tokens``: the sequential registry's id -> url/owner table.
- ``id_counters``: deploy nonce and registry id counters.
- ``event_log``: write-ahead log of emitted events.
"""

from __future__ import annotations

from sqlalchemy import (
    Column,
    ForeignKey,
    Integer,
    LargeBinary,
    MetaData,
    Table,
    Text,
    UniqueConstraint,
)

metadata = MetaData()

accounts = Table(
    "accounts",
    metadata,
    Column("address", Text, primary_key=True),  # 0x-prefixed hex
    Column("kind", Text, nullable=False),  # template | clone
    Column("code", LargeBinary, nullable=False),
    Column("deployer", Text),
    Column("created", Text, nullable=False),
)

storage_slots = Table(
    "storage_slots",
    metadata,
    Column("address", Text, ForeignKey("accounts.address"), nullable=False),
    Column("slot", Integer, nullable=False),
    Column("value", Text, nullable=False),  # 32-byte hex
    UniqueConstraint("address", "slot"),
)

registry_tokens = Table(
    "registry_tokens",
    metadata,
    Column("token_id", Integer, primary_key=True, autoincrement=False),
    Column("url", Text, nullable=False),
    Column("owner", Text, nullable=False),
    Column("created", Text, nullable=False),
)

id_counters = Table(
    "id_counters",
    metadata,
    Column("counter", Text, primary_key=True),
    Column("next_value", Integer, nullable=False),
)

event_log = Table(
    "event_log",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("hook_name", Text, nullable=False),
    Column("payload", Text, nullable=False),  # JSON
    Column("status", Text, nullable=False),  # pending | completed | failed | dead_letter
    Column("retries", Integer, default=0, server_default="0"),
    Column("error", Text),
    Column("created", Text, nullable=False),
    Column("completed", Text),
)
