"""
Currency normalization for the currency leg of a trade.

Native value attached to a call is only accepted when it pays a leg that
names the native-currency placeholder, and only for exactly that leg's
amount.  Accepted value is wrapped into the fungible form and the engine
itself becomes the payer of the leg for the rest of the call.
"""

from __future__ import annotations

from dataclasses import dataclass

from ..exceptions import InvalidPayment
from ..logger import get_logger
from .interfaces import WrapCapability
from .order import Asset

logger = get_logger(__name__)


@dataclass(frozen=True)
class NormalizedLeg:
    """How a currency leg will actually be settled."""
    currency: str     # token transferred (wrapped token for native legs)
    payer: str
    amount: int
    wrapped: bool = False


class CurrencyNormalizer:

    def __init__(self, wrapper: WrapCapability, custodian: str):
        """
        Args:
            wrapper: Wrap capability for the native currency
            custodian: Account that receives wrapped value (the engine)
        """
        self.wrapper = wrapper
        self.custodian = custodian

    def settlement_token(self, leg: Asset) -> str:
        """Token actually moved for a leg; native legs settle in wrapped form."""
        return self.wrapper.address if leg.is_native else leg.token

    async def normalize(self, leg: Asset, value: int, payer: str) -> NormalizedLeg:
        """
        Resolve the payer and token of a currency leg.

        Args:
            leg: The currency leg of the order
            value: Native value attached to the call
            payer: Party paying the leg when no value is attached

        Raises:
            InvalidPayment: Attached value is negative, is attached to a
                non-native leg, or does not equal the leg amount exactly
        """
        if value < 0:
            raise InvalidPayment(f"Attached value cannot be negative: {value}")

        if value == 0:
            return NormalizedLeg(
                currency=self.settlement_token(leg),
                payer=payer,
                amount=leg.amount_or_id,
            )

        if not leg.is_native:
            raise InvalidPayment(
                f"Native value {value} attached but leg is paid in {leg.token}"
            )
        if value != leg.amount_or_id:
            raise InvalidPayment(
                f"Attached value {value} does not match required amount {leg.amount_or_id}"
            )

        await self.wrapper.wrap(self.custodian, value)
        logger.debug(f"Wrapped {value} native units into custody of {self.custodian}")
        return NormalizedLeg(
            currency=self.wrapper.address,
            payer=self.custodian,
            amount=leg.amount_or_id,
            wrapped=True,
        )
