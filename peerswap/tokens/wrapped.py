"""
Wrapped native currency.

A fungible token whose supply is created by wrapping native value attached
to a call.  The settlement engine uses it as its wrap capability.
"""

from __future__ import annotations

from .fungible import FungibleToken, TokenError


class WrappedNative(FungibleToken):

    def __init__(self, address: str, name: str = "Wrapped Ether", symbol: str = "WETH", decimals: int = 18):
        super().__init__(address, name, symbol, decimals)
        self._native_reserve = 0

    @property
    def native_reserve(self) -> int:
        """Native value held against the wrapped supply."""
        return self._native_reserve

    async def wrap(self, account: str, amount: int) -> None:
        """Credit `account` with `amount` wrapped units for native value received."""
        if amount <= 0:
            raise TokenError(f"Wrap amount must be positive, got {amount}")
        self.mint(account, amount)
        self._native_reserve += amount

    def export_state(self):
        return (super().export_state(), self._native_reserve)

    def import_state(self, state) -> None:
        base, self._native_reserve = state
        super().import_state(base)
