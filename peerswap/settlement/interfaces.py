"""
Collaborator interfaces consumed by the settlement engine.

The engine never implements token semantics itself; it drives these
capabilities and treats every refusal as a failed transfer.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class AssetLedger(Protocol):
    """
    Transfer capability with undo support.

    `transfer` moves `amount_or_id` of `token` from `sender` to `recipient`
    on behalf of `spender` and returns False when the ledger refuses.  The
    kind of asset (fungible amount or unique item) is implied by the token.
    """

    async def transfer(
        self,
        token: str,
        spender: str,
        sender: str,
        recipient: str,
        amount_or_id: int,
    ) -> bool:
        ...

    def snapshot(self) -> int:
        ...

    def revert(self, snapshot_id: int) -> None:
        ...

    def release(self, snapshot_id: int) -> None:
        ...


@runtime_checkable
class WrapCapability(Protocol):
    """Converts attached native value into the fungible wrapped currency."""

    @property
    def address(self) -> str:
        ...

    async def wrap(self, account: str, amount: int) -> None:
        ...


@runtime_checkable
class ContractWallet(Protocol):
    """A smart-contract account that certifies signatures on its own behalf."""

    def is_valid_signature(self, digest: bytes, signature: bytes) -> bytes:
        ...
