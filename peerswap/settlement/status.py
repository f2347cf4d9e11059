"""
PeerSwap Order Status Store

Per-(maker, order hash) status ledger.  Every key starts OPEN and may move
exactly once, to EXECUTED or to CANCELED; terminal states are permanent and
nothing is ever deleted.

Writes happen inside a unit of work: `transition` stages a change that only
becomes visible to other callers after `commit`, and `rollback` discards
every staged change of the current call.
"""

from __future__ import annotations

import time
from abc import ABC, abstractmethod
from enum import IntEnum
from typing import Dict, Tuple

from ..crypto.address import normalize_address
from ..exceptions import OrderNotOpen
from ..logger import get_logger

logger = get_logger(__name__)


class OrderStatus(IntEnum):
    OPEN = 0
    EXECUTED = 1
    CANCELED = 2

    @property
    def is_terminal(self) -> bool:
        return self is not OrderStatus.OPEN


def check_transition(expected: OrderStatus, next_status: OrderStatus) -> None:
    """Only OPEN → EXECUTED and OPEN → CANCELED exist."""
    expected, next_status = OrderStatus(expected), OrderStatus(next_status)
    if expected is not OrderStatus.OPEN or not next_status.is_terminal:
        raise ValueError(
            f"Illegal status transition {OrderStatus(expected).name} -> "
            f"{OrderStatus(next_status).name}"
        )


def _key(maker: str, order_hash: bytes) -> Tuple[str, bytes]:
    if len(order_hash) != 32:
        raise ValueError(f"Order hash must be 32 bytes, got {len(order_hash)}")
    return normalize_address(maker), bytes(order_hash)


class StatusStore(ABC):
    """Interface shared by the in-memory and SQLite stores."""

    @abstractmethod
    async def status_of(self, maker: str, order_hash: bytes) -> OrderStatus:
        ...

    @abstractmethod
    async def transition(
        self,
        maker: str,
        order_hash: bytes,
        expected: OrderStatus,
        next_status: OrderStatus,
    ) -> None:
        ...

    @abstractmethod
    async def commit(self) -> None:
        ...

    @abstractmethod
    async def rollback(self) -> None:
        ...


class MemoryStatusStore(StatusStore):
    """Dict-backed store for tests and single-process use."""

    def __init__(self):
        self._statuses: Dict[Tuple[str, bytes], OrderStatus] = {}
        self._pending: Dict[Tuple[str, bytes], OrderStatus] = {}

    async def status_of(self, maker: str, order_hash: bytes) -> OrderStatus:
        key = _key(maker, order_hash)
        if key in self._pending:
            return self._pending[key]
        return self._statuses.get(key, OrderStatus.OPEN)

    async def transition(
        self,
        maker: str,
        order_hash: bytes,
        expected: OrderStatus,
        next_status: OrderStatus,
    ) -> None:
        check_transition(expected, next_status)
        current = await self.status_of(maker, order_hash)
        if current != expected:
            raise OrderNotOpen(
                f"Order 0x{bytes(order_hash).hex()} is {current.name}, expected {expected.name}"
            )
        self._pending[_key(maker, order_hash)] = OrderStatus(next_status)

    async def commit(self) -> None:
        self._statuses.update(self._pending)
        self._pending.clear()

    async def rollback(self) -> None:
        self._pending.clear()

    def __len__(self) -> int:
        return len(self._statuses)


class SQLiteStatusStore(StatusStore):
    """
    Durable store on the `order_status` table.

    Only terminal states are written.  The OPEN → terminal transition is a
    conditional insert on the (maker, order_hash) primary key, so the database
    itself is the serialization point: of two racing writers, exactly one
    inserts a row and the other sees OrderNotOpen.
    """

    def __init__(self, database):
        self.db = database

    @property
    def connection(self):
        return self.db.connection

    async def status_of(self, maker: str, order_hash: bytes) -> OrderStatus:
        maker, order_hash = _key(maker, order_hash)
        cursor = await self.connection.execute(
            "SELECT status FROM order_status WHERE maker = ? AND order_hash = ?",
            (maker, order_hash.hex()),
        )
        row = await cursor.fetchone()
        await cursor.close()
        if row is None:
            return OrderStatus.OPEN
        return OrderStatus(row[0])

    async def transition(
        self,
        maker: str,
        order_hash: bytes,
        expected: OrderStatus,
        next_status: OrderStatus,
    ) -> None:
        check_transition(expected, next_status)
        maker, order_hash = _key(maker, order_hash)
        cursor = await self.connection.execute(
            """
            INSERT INTO order_status (maker, order_hash, status, updated_at)
            VALUES (?, ?, ?, ?)
            ON CONFLICT (maker, order_hash) DO NOTHING
            """,
            (maker, order_hash.hex(), int(next_status), int(time.time())),
        )
        inserted = cursor.rowcount
        await cursor.close()
        if inserted != 1:
            current = await self.status_of(maker, order_hash)
            raise OrderNotOpen(
                f"Order 0x{order_hash.hex()} is {current.name}, expected {expected.name}"
            )

    async def commit(self) -> None:
        await self.connection.commit()

    async def rollback(self) -> None:
        await self.connection.rollback()

    async def count(self) -> int:
        cursor = await self.connection.execute("SELECT COUNT(*) FROM order_status")
        row = await cursor.fetchone()
        await cursor.close()
        return int(row[0])
