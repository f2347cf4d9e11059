"""
Fungible token ledger used as a settlement collaborator.

ERC-20 style semantics reduced to what settlement needs:
  - balance_of / allowance
  - approve(owner, spender, amount)
  - transfer_from(spender, sender, recipient, amount)
  - mint (test / bootstrap funding)

Amounts are integers in the token's smallest unit.
"""

from __future__ import annotations

from typing import Dict, Tuple

from ..constants import UINT256_MAX
from ..crypto.address import normalize_address
from ..logger import get_logger

logger = get_logger(__name__)


# ══════════════════════════════════════════════════════════════════════
#  EXCEPTIONS
# ══════════════════════════════════════════════════════════════════════

class TokenError(Exception):
    """Base exception for token ledger operations."""


class InsufficientBalanceError(TokenError):
    """Raised when sender balance is too low."""


class InsufficientAllowanceError(TokenError):
    """Raised when spender allowance is too low."""


class NotItemOwnerError(TokenError):
    """Raised when an item is moved by someone who neither owns nor may move it."""


# ══════════════════════════════════════════════════════════════════════
#  FUNGIBLE TOKEN
# ══════════════════════════════════════════════════════════════════════

class FungibleToken:
    """
    Balance + allowance ledger for one fungible token.

    A spender moving its own funds needs no allowance; anyone else must hold
    one at least as large as the amount, which is consumed by the transfer.
    An allowance of UINT256_MAX is treated as unlimited.
    """

    def __init__(self, address: str, name: str, symbol: str, decimals: int = 18):
        if not name:
            raise TokenError("Token name cannot be empty")
        if not symbol:
            raise TokenError("Token symbol cannot be empty")
        if decimals < 0 or decimals > 18:
            raise TokenError(f"Decimals must be 0-18, got {decimals}")

        self.address = normalize_address(address)
        self.name = name
        self.symbol = symbol
        self.decimals = decimals
        self._total_supply = 0

        self._balances: Dict[str, int] = {}
        self._allowances: Dict[Tuple[str, str], int] = {}  # (owner, spender)

    # ── Read-only views ───────────────────────────────────────────────

    @property
    def total_supply(self) -> int:
        return self._total_supply

    def balance_of(self, account: str) -> int:
        return self._balances.get(normalize_address(account), 0)

    def allowance(self, owner: str, spender: str) -> int:
        return self._allowances.get((normalize_address(owner), normalize_address(spender)), 0)

    # ── State snapshot (used by TokenLedger) ──────────────────────────

    def export_state(self):
        return (self._total_supply, dict(self._balances), dict(self._allowances))

    def import_state(self, state) -> None:
        self._total_supply, balances, allowances = state
        self._balances = dict(balances)
        self._allowances = dict(allowances)

    # ── Mutations ─────────────────────────────────────────────────────

    def mint(self, account: str, amount: int) -> None:
        if amount < 0:
            raise TokenError("Mint amount cannot be negative")
        if self._total_supply + amount > UINT256_MAX:
            raise TokenError("Mint would overflow total supply")
        account = normalize_address(account)
        self._balances[account] = self._balances.get(account, 0) + amount
        self._total_supply += amount

    def approve(self, owner: str, spender: str, amount: int) -> None:
        if amount < 0 or amount > UINT256_MAX:
            raise TokenError(f"Allowance out of range: {amount}")
        self._allowances[(normalize_address(owner), normalize_address(spender))] = amount

    async def transfer_from(self, spender: str, sender: str, recipient: str, amount: int) -> None:
        """
        Move `amount` from `sender` to `recipient` on behalf of `spender`.

        Raises:
            InsufficientAllowanceError: spender is not sender and lacks allowance
            InsufficientBalanceError: sender balance too low
        """
        if amount < 0:
            raise TokenError("Transfer amount cannot be negative")

        spender = normalize_address(spender)
        sender = normalize_address(sender)
        recipient = normalize_address(recipient)

        if spender != sender:
            allowed = self._allowances.get((sender, spender), 0)
            if allowed < amount:
                raise InsufficientAllowanceError(
                    f"{self.symbol}: allowance {allowed} < {amount} for {spender}"
                )
            if allowed != UINT256_MAX:
                self._allowances[(sender, spender)] = allowed - amount

        balance = self._balances.get(sender, 0)
        if balance < amount:
            raise InsufficientBalanceError(
                f"{self.symbol}: balance {balance} < {amount} for {sender}"
            )

        self._balances[sender] = balance - amount
        self._balances[recipient] = self._balances.get(recipient, 0) + amount
        logger.debug(f"{self.symbol}: {amount} {sender} -> {recipient}")

    def __repr__(self) -> str:
        return f"FungibleToken({self.symbol}, {self.address})"
