"""
PeerSwap Order Model

A signed, off-chain order.  The maker (seller) fixes both legs of the trade,
the fee schedule, a deadline and a salt; the order's identity is its
canonical hash (see encoder.py), so every field here is consensus-critical.

Fees are carried as a single list of (recipient, amount) pairs, which makes
the "same length" rule of the historical parallel-list form structural.
`Order.from_parallel_fees` accepts that older form and enforces the rule.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any, Dict, Iterable, Sequence, Tuple

from ..constants import NATIVE_CURRENCY, UINT256_MAX
from ..crypto.address import normalize_address
from ..exceptions import InvalidArrays


class OrderType(IntEnum):
    """Trade topologies.  Values are part of the signed order format."""
    ASSET_FOR_ASSET = 0
    BUY_OFFER = 1    # maker offers currency (sell leg) for an asset (ask leg)
    SELL_OFFER = 2   # maker offers an asset (sell leg) for currency (ask leg)


def _require_uint256(name: str, value: int) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"{name} must be an integer, got {type(value).__name__}")
    if value < 0 or value > UINT256_MAX:
        raise ValueError(f"{name} out of uint256 range: {value}")
    return value


@dataclass(frozen=True)
class Asset:
    """One leg of a trade: a token and either an amount or a unique item id."""
    token: str
    amount_or_id: int

    def __post_init__(self):
        object.__setattr__(self, "token", normalize_address(self.token))
        _require_uint256("amount_or_id", self.amount_or_id)

    @property
    def is_native(self) -> bool:
        return self.token == NATIVE_CURRENCY

    def to_dict(self) -> Dict[str, Any]:
        return {"token": self.token, "amountOrId": str(self.amount_or_id)}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Asset":
        return cls(token=data["token"], amount_or_id=int(data["amountOrId"]))


@dataclass(frozen=True)
class FeeShare:
    """A single fee payout."""
    recipient: str
    amount: int

    def __post_init__(self):
        object.__setattr__(self, "recipient", normalize_address(self.recipient))
        _require_uint256("fee amount", self.amount)

    def to_dict(self) -> Dict[str, Any]:
        return {"recipient": self.recipient, "amount": str(self.amount)}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "FeeShare":
        return cls(recipient=data["recipient"], amount=int(data["amount"]))


def pair_fees(recipients: Sequence[str], amounts: Sequence[int]) -> Tuple[FeeShare, ...]:
    """
    Zip parallel recipient/amount lists into fee shares.

    Raises:
        InvalidArrays: If the lists differ in length
    """
    if len(recipients) != len(amounts):
        raise InvalidArrays(
            f"Fee arrays differ in length: {len(recipients)} recipients, "
            f"{len(amounts)} amounts"
        )
    return tuple(FeeShare(r, a) for r, a in zip(recipients, amounts))


@dataclass(frozen=True)
class Order:
    """
    An order as signed by its maker.

    Attributes:
        seller: Maker address, the party bound by the order
        order_type: Trade topology
        ask: What the maker wants to receive
        sell: What the maker gives
        fees: Ordered fee payouts, deducted from the currency leg
        expiration: Unix timestamp after which the order cannot be filled
        salt: Uniqueness value so identical terms yield distinct orders
    """
    seller: str
    order_type: OrderType
    ask: Asset
    sell: Asset
    fees: Tuple[FeeShare, ...] = field(default_factory=tuple)
    expiration: int = 0
    salt: int = 0

    def __post_init__(self):
        object.__setattr__(self, "seller", normalize_address(self.seller))
        object.__setattr__(self, "order_type", OrderType(self.order_type))
        object.__setattr__(self, "fees", tuple(self.fees))
        for fee in self.fees:
            if not isinstance(fee, FeeShare):
                raise ValueError(f"fees must contain FeeShare entries, got {type(fee).__name__}")
        _require_uint256("expiration", self.expiration)
        _require_uint256("salt", self.salt)

    @classmethod
    def from_parallel_fees(
        cls,
        seller: str,
        order_type: OrderType,
        ask: Asset,
        sell: Asset,
        fee_recipients: Sequence[str],
        fee_amounts: Sequence[int],
        expiration: int,
        salt: int,
    ) -> "Order":
        return cls(
            seller=seller,
            order_type=order_type,
            ask=ask,
            sell=sell,
            fees=pair_fees(fee_recipients, fee_amounts),
            expiration=expiration,
            salt=salt,
        )

    @property
    def total_fees(self) -> int:
        return sum(fee.amount for fee in self.fees)

    @property
    def fee_recipients(self) -> Tuple[str, ...]:
        return tuple(fee.recipient for fee in self.fees)

    @property
    def fee_amounts(self) -> Tuple[int, ...]:
        return tuple(fee.amount for fee in self.fees)

    def is_expired(self, now: float) -> bool:
        return now > self.expiration

    # -- Serialization -------------------------------------------------------

    def to_dict(self) -> Dict[str, Any]:
        """JSON-friendly form; integers are decimal strings."""
        return {
            "seller": self.seller,
            "orderType": self.order_type.name,
            "ask": self.ask.to_dict(),
            "sell": self.sell.to_dict(),
            "fees": [fee.to_dict() for fee in self.fees],
            "expiration": str(self.expiration),
            "salt": str(self.salt),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Order":
        # Accept enum names ("SELL_OFFER") or raw values (2)
        raw_type = data["orderType"]
        if isinstance(raw_type, str) and not raw_type.isdigit():
            order_type = OrderType[raw_type.upper()]
        else:
            order_type = OrderType(int(raw_type))

        return cls(
            seller=data["seller"],
            order_type=order_type,
            ask=Asset.from_dict(data["ask"]),
            sell=Asset.from_dict(data["sell"]),
            fees=tuple(FeeShare.from_dict(f) for f in data.get("fees", [])),
            expiration=int(data["expiration"]),
            salt=int(data["salt"]),
        )


def fees_from_pairs(pairs: Iterable[Tuple[str, int]]) -> Tuple[FeeShare, ...]:
    """Build a fee schedule from (recipient, amount) tuples."""
    return tuple(FeeShare(recipient, amount) for recipient, amount in pairs)
