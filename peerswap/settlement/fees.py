"""
Fee distribution from the currency leg of a trade.
"""

from __future__ import annotations

from typing import Sequence

from ..exceptions import ArithmeticUnderflow, TransferFailed
from ..logger import get_logger
from .interfaces import AssetLedger
from .order import FeeShare, pair_fees

logger = get_logger(__name__)


def total_fees(fees: Sequence[FeeShare]) -> int:
    return sum(fee.amount for fee in fees)


def net_of_fees(amount: int, fees: Sequence[FeeShare]) -> int:
    """
    `amount - sum(fees)`, refusing to go below zero.

    Raises:
        ArithmeticUnderflow: If the fees exceed the amount
    """
    fee_total = total_fees(fees)
    if fee_total > amount:
        raise ArithmeticUnderflow(f"Fees {fee_total} exceed amount {amount}")
    return amount - fee_total


class FeeDistributor:
    """Pays fee recipients in list order on behalf of a spender."""

    def __init__(self, ledger: AssetLedger, spender: str):
        self.ledger = ledger
        self.spender = spender

    async def distribute(
        self,
        currency: str,
        payer: str,
        recipients: Sequence[str],
        amounts: Sequence[int],
    ) -> int:
        """
        Pay `amounts[i]` from `payer` to `recipients[i]`.

        Raises:
            InvalidArrays: If the lists differ in length
            TransferFailed: If any single payment is refused

        Returns:
            Total paid
        """
        return await self.distribute_shares(currency, payer, pair_fees(recipients, amounts))

    async def distribute_shares(
        self,
        currency: str,
        payer: str,
        fees: Sequence[FeeShare],
    ) -> int:
        paid = 0
        for index, fee in enumerate(fees):
            ok = await self.ledger.transfer(
                currency, self.spender, payer, fee.recipient, fee.amount
            )
            if not ok:
                raise TransferFailed(
                    f"Fee #{index} of {fee.amount} from {payer} to {fee.recipient} failed"
                )
            paid += fee.amount
        return paid
