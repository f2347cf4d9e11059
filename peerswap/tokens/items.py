"""
Unique-item token ledger (ERC-721 style) used as a settlement collaborator.

Recipients may register an async receive hook, which runs after ownership
changes hands, the way contract recipients get a callback on transfer.
A hook is arbitrary code: it can call back into the engine.
"""

from __future__ import annotations

from typing import Awaitable, Callable, Dict, Optional, Set, Tuple

from ..crypto.address import normalize_address
from ..logger import get_logger
from .fungible import NotItemOwnerError, TokenError

logger = get_logger(__name__)

ReceiveHook = Callable[[str, str, int], Awaitable[None]]  # (operator, sender, item_id)


class ItemToken:
    """Ownership ledger for one collection of unique items."""

    def __init__(self, address: str, name: str, symbol: str):
        if not name:
            raise TokenError("Collection name cannot be empty")
        self.address = normalize_address(address)
        self.name = name
        self.symbol = symbol

        self._owners: Dict[int, str] = {}
        self._item_approvals: Dict[int, str] = {}
        self._operators: Set[Tuple[str, str]] = set()  # (owner, operator)
        self._receive_hooks: Dict[str, ReceiveHook] = {}

    # ── Read-only views ───────────────────────────────────────────────

    def owner_of(self, item_id: int) -> Optional[str]:
        return self._owners.get(item_id)

    def get_approved(self, item_id: int) -> Optional[str]:
        return self._item_approvals.get(item_id)

    def is_approved_for_all(self, owner: str, operator: str) -> bool:
        return (normalize_address(owner), normalize_address(operator)) in self._operators

    def balance_of(self, account: str) -> int:
        account = normalize_address(account)
        return sum(1 for owner in self._owners.values() if owner == account)

    # ── State snapshot (used by TokenLedger) ──────────────────────────

    def export_state(self):
        return (dict(self._owners), dict(self._item_approvals), set(self._operators))

    def import_state(self, state) -> None:
        owners, approvals, operators = state
        self._owners = dict(owners)
        self._item_approvals = dict(approvals)
        self._operators = set(operators)

    # ── Mutations ─────────────────────────────────────────────────────

    def mint(self, account: str, item_id: int) -> None:
        if item_id in self._owners:
            raise TokenError(f"{self.symbol} #{item_id} already exists")
        self._owners[item_id] = normalize_address(account)

    def approve(self, owner: str, operator: str, item_id: int) -> None:
        if self._owners.get(item_id) != normalize_address(owner):
            raise NotItemOwnerError(f"{owner} does not own {self.symbol} #{item_id}")
        self._item_approvals[item_id] = normalize_address(operator)

    def set_approval_for_all(self, owner: str, operator: str, approved: bool = True) -> None:
        key = (normalize_address(owner), normalize_address(operator))
        if approved:
            self._operators.add(key)
        else:
            self._operators.discard(key)

    def on_receive(self, account: str, hook: Optional[ReceiveHook]) -> None:
        """Install (or with None, remove) the receive hook of `account`."""
        account = normalize_address(account)
        if hook is None:
            self._receive_hooks.pop(account, None)
        else:
            self._receive_hooks[account] = hook

    async def transfer_from(self, spender: str, sender: str, recipient: str, item_id: int) -> None:
        """
        Move item `item_id` from `sender` to `recipient` on behalf of `spender`.

        Raises:
            NotItemOwnerError: sender does not own the item, or spender may not move it
        """
        spender = normalize_address(spender)
        sender = normalize_address(sender)
        recipient = normalize_address(recipient)

        owner = self._owners.get(item_id)
        if owner != sender:
            raise NotItemOwnerError(f"{sender} does not own {self.symbol} #{item_id}")
        if not (
            spender == owner
            or self._item_approvals.get(item_id) == spender
            or (owner, spender) in self._operators
        ):
            raise NotItemOwnerError(f"{spender} may not move {self.symbol} #{item_id}")

        self._owners[item_id] = recipient
        self._item_approvals.pop(item_id, None)
        logger.debug(f"{self.symbol} #{item_id}: {sender} -> {recipient}")

        hook = self._receive_hooks.get(recipient)
        if hook is not None:
            await hook(spender, sender, item_id)

    def __repr__(self) -> str:
        return f"ItemToken({self.symbol}, {self.address})"
