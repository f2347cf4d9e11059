"""
Call-scoped mutual exclusion for the engine's state-mutating entry points.

Two different situations are told apart:

  - Reentrancy: code running *inside* an active swap/cancel (typically a
    token callback during a transfer) tries to enter again.  This fails
    immediately with ReentrancyError.
  - Concurrency: an unrelated task calls in while another call is active.
    It waits on the lock and runs afterwards.

The context marker lives in a ContextVar, so it follows the awaiting call
chain and any task spawned from inside the guarded section.
"""

from __future__ import annotations

import asyncio
import contextvars
from typing import Optional

from ..exceptions import ReentrancyError


class ReentrancyGuard:
    """`async with guard:` around every state-mutating entry point."""

    def __init__(self, name: str = "engine"):
        self.name = name
        self._lock = asyncio.Lock()
        self._inside: contextvars.ContextVar[bool] = contextvars.ContextVar(
            f"peerswap_guard_{name}_{id(self)}", default=False
        )
        self._token: Optional[contextvars.Token] = None

    @property
    def locked(self) -> bool:
        return self._lock.locked()

    async def __aenter__(self) -> "ReentrancyGuard":
        if self._inside.get():
            raise ReentrancyError(f"Reentrancy detected: {self.name} is locked")
        await self._lock.acquire()
        self._token = self._inside.set(True)
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        token, self._token = self._token, None
        self._inside.reset(token)
        self._lock.release()
