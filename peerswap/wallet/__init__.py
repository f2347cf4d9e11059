"""
PeerSwap contract wallets.
"""

from .contract import INVALID_VALUE, MultisigWallet, OwnedWallet, sign_for_wallet

__all__ = [
    'OwnedWallet',
    'MultisigWallet',
    'sign_for_wallet',
    'INVALID_VALUE',
]
