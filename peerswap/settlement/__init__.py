"""
PeerSwap Settlement

Atomic settlement of signed peer-to-peer swap orders:

- Order model and canonical, domain-separated order hashing
- Signature verification (EIP712, ETH_SIGN, contract WALLET schemes)
- Per-maker order status ledger (memory and SQLite)
- Fee distribution and native currency normalization
- The SwapEngine tying it together under a reentrancy guard
"""

from .order import Asset, FeeShare, Order, OrderType, fees_from_pairs, pair_fees
from .encoder import OrderEncoder, hash_domain
from .signatures import (
    SignatureType,
    SignatureVerifier,
    WalletRegistry,
    sign_order_digest,
    split_signature,
    wallet_signature,
)
from .status import MemoryStatusStore, OrderStatus, SQLiteStatusStore, StatusStore
from .guard import ReentrancyGuard
from .normalizer import CurrencyNormalizer, NormalizedLeg
from .fees import FeeDistributor, net_of_fees, total_fees
from .interfaces import AssetLedger, ContractWallet, WrapCapability
from .engine import SwapEngine, SwapResult

__all__ = [
    # Orders
    "Asset",
    "FeeShare",
    "Order",
    "OrderType",
    "fees_from_pairs",
    "pair_fees",
    # Hashing
    "OrderEncoder",
    "hash_domain",
    # Signatures
    "SignatureType",
    "SignatureVerifier",
    "WalletRegistry",
    "sign_order_digest",
    "split_signature",
    "wallet_signature",
    # Status
    "MemoryStatusStore",
    "OrderStatus",
    "SQLiteStatusStore",
    "StatusStore",
    # Settlement
    "ReentrancyGuard",
    "CurrencyNormalizer",
    "NormalizedLeg",
    "FeeDistributor",
    "net_of_fees",
    "total_fees",
    "AssetLedger",
    "ContractWallet",
    "WrapCapability",
    "SwapEngine",
    "SwapResult",
]
