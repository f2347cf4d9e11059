"""
PeerSwap reference token ledgers.

In-memory fungible, unique-item and wrapped-native tokens plus the ledger
that exposes them to the settlement engine.
"""

from .fungible import (
    FungibleToken,
    InsufficientAllowanceError,
    InsufficientBalanceError,
    NotItemOwnerError,
    TokenError,
)
from .items import ItemToken
from .ledger import TokenLedger
from .wrapped import WrappedNative

__all__ = [
    'FungibleToken',
    'ItemToken',
    'WrappedNative',
    'TokenLedger',
    'TokenError',
    'InsufficientBalanceError',
    'InsufficientAllowanceError',
    'NotItemOwnerError',
]
