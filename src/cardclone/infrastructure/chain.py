"""Chain — the simulated host every service runs against.

The Chain owns the ledger database, the template table, and the event bus.
It offers the two collaborator primitives clones rely on:

- **deploy**: run init code, persist the returned code image under a fresh
  address (plus any slots written during deployment), or return None.
- **call**: forward a call to a clone. The clone's stub names its template;
  the template runs with the clone's own code image and storage as context.

:meth:`Chain.transaction` gives every operation all-or-nothing semantics:
ledger writes, slot writes, and logged events commit together or not at
all. Logged events are delivered to plugins after commit.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from sqlalchemy import insert, select, update

from cardclone.domain.errors import MalformedRecord, NotFound
from cardclone.domain.identity import (
    derive_address,
    format_identity,
    named_address,
    require_identity,
)
from cardclone.domain.stub import stub_target
from cardclone.domain.template import CardTemplate
from cardclone.domain.variants import CardVariant
from cardclone.infrastructure.database.counters import next_value
from cardclone.infrastructure.database.engine import init_database
from cardclone.infrastructure.database.schema import accounts, storage_slots
from cardclone.infrastructure.interpreter import ExecutionError, run_init_code
from cardclone.plugins.event_bus import write_event
from cardclone.services._helpers import now_iso

if TYPE_CHECKING:
    from collections.abc import Iterator

    from sqlalchemy import Connection
    from sqlalchemy.engine import Engine

    from cardclone.config.settings import CardSettings
    from cardclone.plugins.event_bus import EventBus

logger = logging.getLogger(__name__)

EMPTY_SLOT = bytes(32)


# ---------------------------------------------------------------------------
# Call context handed to templates
# ---------------------------------------------------------------------------


@dataclass
class _CloneContext:
    """A clone's view of the host while its template runs."""

    txn: ChainTransaction
    address: bytes
    caller: bytes

    def own_code(self) -> bytes:
        return self.txn.code_at(self.address)

    def load_slot(self, slot: int) -> bytes:
        return self.txn.load_slot(self.address, slot)

    def store_slot(self, slot: int, value: bytes) -> None:
        self.txn.store_slot(self.address, slot, value)

    def emit(self, hook_name: str, payload: dict[str, Any]) -> None:
        self.txn.emit(hook_name, payload)


# ---------------------------------------------------------------------------
# ChainTransaction — yielded to callers within transaction()
# ---------------------------------------------------------------------------


@dataclass
class ChainTransaction:
    """Active transaction with the ledger connection.

    All state changes (deployments, slot writes, events) go through this
    object so they share the connection's commit or rollback.
    """

    conn: Connection
    _chain: Chain
    _events: list[tuple[int, str, dict[str, Any]]] = field(default_factory=list, repr=False)

    # ------------------------------------------------------------------
    # Deployment primitive
    # ------------------------------------------------------------------

    def deploy(self, deployer: bytes, init_code: bytes) -> bytes | None:
        """Run *init_code* and persist the resulting code image.

        Returns the new address, or None if the init code aborted, returned
        an empty image, or the derived address is already taken.
        """
        deployer = require_identity(deployer)
        nonce = next_value(self.conn, "deploy")
        address = derive_address(deployer, nonce)

        if self._account_exists(address):
            logger.warning("Deploy collision at %s", format_identity(address))
            return None

        try:
            result = run_init_code(init_code, max_steps=self._chain.max_init_steps)
        except ExecutionError as exc:
            logger.warning("Deploy aborted: %s", exc)
            return None

        if not result.code:
            logger.warning("Deploy returned an empty code image")
            return None

        self.conn.execute(
            insert(accounts).values(
                address=format_identity(address),
                kind="clone",
                code=result.code,
                deployer=format_identity(deployer),
                created=now_iso(),
            )
        )
        for slot, value in result.storage.items():
            self.store_slot(address, slot, value)

        logger.debug(
            "Deployed %d-byte code image at %s", len(result.code), format_identity(address)
        )
        return address

    # ------------------------------------------------------------------
    # Forward-call primitive
    # ------------------------------------------------------------------

    def call(self, address: bytes, method: str, *args: Any, caller: bytes) -> Any:
        """Forward *method* to the template named by the clone's stub.

        Raises:
            NotFound: If no clone exists at *address*.
            MalformedRecord: If the code image has no valid stub or its stub
                names an unknown template.
        """
        row = self.conn.execute(
            select(accounts.c.code, accounts.c.kind).where(
                accounts.c.address == format_identity(address)
            )
        ).first()
        if row is None or row.kind != "clone":
            raise NotFound(f"No card at {format_identity(address)}", handle=address.hex())

        target = stub_target(bytes(row.code))
        template = self._chain.template_at(target)
        if template is None:
            raise MalformedRecord(
                f"Stub of {format_identity(address)} forwards to unknown template "
                f"{format_identity(target)}"
            )

        ctx = _CloneContext(txn=self, address=address, caller=require_identity(caller))
        return template.execute(ctx, method, *args)

    # ------------------------------------------------------------------
    # Code and storage access
    # ------------------------------------------------------------------

    def code_at(self, address: bytes) -> bytes:
        """Permanent code image at *address* (empty if none)."""
        code = self.conn.execute(
            select(accounts.c.code).where(accounts.c.address == format_identity(address))
        ).scalar_one_or_none()
        return bytes(code) if code is not None else b""

    def load_slot(self, address: bytes, slot: int) -> bytes:
        """32-byte value of *slot* at *address* (zeros if never written)."""
        value = self.conn.execute(
            select(storage_slots.c.value).where(
                storage_slots.c.address == format_identity(address),
                storage_slots.c.slot == slot,
            )
        ).scalar_one_or_none()
        return bytes.fromhex(value) if value is not None else EMPTY_SLOT

    def store_slot(self, address: bytes, slot: int, value: bytes) -> None:
        """Write a 32-byte *value* into *slot* at *address*."""
        if len(value) != 32:
            msg = f"Slot values are 32 bytes, got {len(value)}"
            raise ValueError(msg)
        key = format_identity(address)
        updated = self.conn.execute(
            update(storage_slots)
            .where(storage_slots.c.address == key, storage_slots.c.slot == slot)
            .values(value=value.hex())
        )
        if updated.rowcount == 0:
            self.conn.execute(
                insert(storage_slots).values(address=key, slot=slot, value=value.hex())
            )

    # ------------------------------------------------------------------
    # Events
    # ------------------------------------------------------------------

    def emit(self, hook_name: str, payload: dict[str, Any]) -> None:
        """Log an event in this transaction; delivered after commit."""
        event_id = write_event(self.conn, hook_name, payload)
        self._events.append((event_id, hook_name, payload))

    def _account_exists(self, address: bytes) -> bool:
        return (
            self.conn.execute(
                select(accounts.c.address).where(accounts.c.address == format_identity(address))
            ).first()
            is not None
        )


# ---------------------------------------------------------------------------
# Chain
# ---------------------------------------------------------------------------


class Chain:
    """The host: ledger engine, template table, and event bus.

    Usage::

        chain = Chain(settings)
        with chain.transaction() as txn:
            handle = txn.deploy(claimer, init_code)
    """

    def __init__(self, settings: CardSettings) -> None:
        self.settings = settings
        self.max_init_steps = settings.chain.max_init_steps
        self._engine = init_database(settings.root, data_dirname=settings.chain.data_dirname)
        self._templates: dict[bytes, CardTemplate] = {}
        self._event_bus: EventBus | None = None
        self.install_templates()

    @property
    def engine(self) -> Engine:
        return self._engine

    @property
    def event_bus(self) -> EventBus | None:
        """The event bus, or None until :meth:`init_event_bus` is called."""
        return self._event_bus

    def init_event_bus(self, *, discover: bool = True) -> EventBus:
        """Create the plugin manager and event bus.

        Registers the built-in audit plugin and, when *discover* is set,
        plugins from the ``cardclone.plugins`` entry point group.
        """
        from cardclone.plugins.builtins.audit import AuditPlugin
        from cardclone.plugins.event_bus import EventBus
        from cardclone.plugins.manager import PluginManager

        pm = PluginManager()
        pm.register_plugin(AuditPlugin(), name="audit")
        if discover:
            pm.discover_and_load()
        self._event_bus = EventBus(self._engine, pm)
        return self._event_bus

    # ------------------------------------------------------------------
    # Templates
    # ------------------------------------------------------------------

    def install_templates(self) -> None:
        """Register one template per variant at its well-known address."""
        with self._engine.begin() as conn:
            for variant in CardVariant:
                address = self.template_address(variant)
                self._templates[address] = CardTemplate(variant)
                key = format_identity(address)
                exists = conn.execute(
                    select(accounts.c.address).where(accounts.c.address == key)
                ).first()
                if exists is None:
                    conn.execute(
                        insert(accounts).values(
                            address=key,
                            kind="template",
                            code=variant.template_label.encode(),
                            created=now_iso(),
                        )
                    )

    @staticmethod
    def template_address(variant: CardVariant) -> bytes:
        """Address of the shared template for *variant*."""
        return named_address(variant.template_label)

    def template_at(self, address: bytes) -> CardTemplate | None:
        """Template registered at *address*, if any."""
        return self._templates.get(address)

    # ------------------------------------------------------------------
    # Transactions
    # ------------------------------------------------------------------

    @contextmanager
    def transaction(self) -> Iterator[ChainTransaction]:
        """All-or-nothing unit of work.

        Commits on normal exit, rolls back on any exception. Events logged
        during the transaction are delivered only after a successful commit.
        """
        with self._engine.begin() as conn:
            txn = ChainTransaction(conn=conn, _chain=self)
            yield txn

        if self._event_bus is not None:
            for event_id, hook_name, payload in txn._events:
                self._event_bus.deliver(event_id, hook_name, payload)

    def close(self) -> None:
        """Dispose the database engine."""
        self._engine.dispose()
