"""
Token Ledger

Routes settlement transfers to the registered token by address and gives
the engine snapshot / revert over every token it knows.  Implements the
AssetLedger capability.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Union

from ..crypto.address import normalize_address
from ..logger import get_logger
from .fungible import FungibleToken, TokenError
from .items import ItemToken

logger = get_logger(__name__)

Token = Union[FungibleToken, ItemToken]


class TokenLedger:
    """Registry of tokens plus a stack of state snapshots."""

    def __init__(self, tokens: Optional[List[Token]] = None):
        self._tokens: Dict[str, Token] = {}
        self._snapshots: List[Dict[str, Any]] = []
        for token in tokens or []:
            self.register(token)

    def register(self, token: Token) -> Token:
        if token.address in self._tokens:
            raise ValueError(f"Token already registered at {token.address}")
        self._tokens[token.address] = token
        return token

    def get(self, address: str) -> Optional[Token]:
        return self._tokens.get(normalize_address(address))

    def __contains__(self, address: str) -> bool:
        return self.get(address) is not None

    def __len__(self) -> int:
        return len(self._tokens)

    async def transfer(
        self,
        token: str,
        spender: str,
        sender: str,
        recipient: str,
        amount_or_id: int,
    ) -> bool:
        """Move an amount or item; False when the token is unknown or refuses."""
        contract = self.get(token)
        if contract is None:
            logger.warning(f"Transfer refused: no token registered at {token}")
            return False
        try:
            await contract.transfer_from(spender, sender, recipient, amount_or_id)
        except TokenError as e:
            logger.warning(f"Transfer refused by {contract.symbol}: {e}")
            return False
        return True

    # ── Snapshots ─────────────────────────────────────────────────────

    def snapshot(self) -> int:
        """
        Capture the state of every registered token.

        Returns:
            Snapshot ID
        """
        self._snapshots.append(
            {address: token.export_state() for address, token in self._tokens.items()}
        )
        return len(self._snapshots) - 1

    def revert(self, snapshot_id: int) -> None:
        """Restore token state to `snapshot_id` and drop it and every newer snapshot."""
        if snapshot_id < 0 or snapshot_id >= len(self._snapshots):
            raise ValueError(f"Invalid snapshot ID: {snapshot_id}")

        snapshot = self._snapshots[snapshot_id]
        for address, state in snapshot.items():
            self._tokens[address].import_state(state)

        self._snapshots = self._snapshots[:snapshot_id]

    def release(self, snapshot_id: int) -> None:
        """Keep current state and forget `snapshot_id` and every newer snapshot."""
        if snapshot_id < 0 or snapshot_id >= len(self._snapshots):
            raise ValueError(f"Invalid snapshot ID: {snapshot_id}")
        self._snapshots = self._snapshots[:snapshot_id]
