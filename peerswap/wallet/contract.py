"""
PeerSwap Contract Wallets

Reference smart-contract accounts for the WALLET signature scheme.  A
contract wallet has an address of its own and no private key; it certifies
a digest by returning WALLET_MAGIC_VALUE from `is_valid_signature`.

  OwnedWallet     one EOA owner signs for the wallet
  MultisigWallet  M-of-N distinct owners sign for the wallet
"""

from dataclasses import dataclass, field
from typing import List, Optional, Set

from ..constants import ECDSA_SIGNATURE_LENGTH, WALLET_MAGIC_VALUE
from ..crypto.address import is_valid_address, normalize_address
from ..crypto.keys import PrivateKey
from ..crypto.signing import ecrecover
from ..logger import get_logger

logger = get_logger(__name__)

INVALID_VALUE = b"\x00\x00\x00\x00"


def _recover(digest: bytes, body: bytes) -> Optional[str]:
    """Signer of one r ++ s ++ v chunk, or None if it does not recover."""
    if len(body) != ECDSA_SIGNATURE_LENGTH:
        return None
    r = int.from_bytes(body[0:32], "big")
    s = int.from_bytes(body[32:64], "big")
    try:
        return ecrecover(digest, body[64], r, s)
    except Exception as e:
        logger.debug(f"Owner signature did not recover: {e}")
        return None


def sign_for_wallet(private_key: PrivateKey, digest: bytes) -> bytes:
    """One owner's 65-byte approval of `digest`."""
    return private_key.sign_msg_hash(digest).to_bytes()


# ═══════════════════════════════════════════════════════════════════════
# SINGLE OWNER
# ═══════════════════════════════════════════════════════════════════════

@dataclass
class OwnedWallet:
    """Contract account controlled by a single externally-owned key."""
    address: str
    owner: str

    def __post_init__(self):
        if not is_valid_address(self.address) or not is_valid_address(self.owner):
            raise ValueError("OwnedWallet needs valid wallet and owner addresses")
        self.address = normalize_address(self.address)
        self.owner = normalize_address(self.owner)

    def is_valid_signature(self, digest: bytes, signature: bytes) -> bytes:
        if _recover(digest, signature) == self.owner:
            return WALLET_MAGIC_VALUE
        return INVALID_VALUE


# ═══════════════════════════════════════════════════════════════════════
# MULTISIG
# ═══════════════════════════════════════════════════════════════════════

@dataclass
class MultisigWallet:
    """
    M-of-N contract account.

    The signature body is a concatenation of 65-byte owner signatures.  It
    is accepted when at least `threshold` of them recover to distinct
    owners; duplicates and non-owners do not count.
    """
    address: str
    owners: List[str] = field(default_factory=list)
    threshold: int = 1

    def __post_init__(self):
        if not is_valid_address(self.address):
            raise ValueError(f"Invalid wallet address: {self.address}")
        self.address = normalize_address(self.address)
        self.owners = [normalize_address(o) for o in self.owners]
        if len(set(self.owners)) != len(self.owners):
            raise ValueError("Duplicate multisig owners")
        if not 1 <= self.threshold <= len(self.owners):
            raise ValueError(
                f"Threshold must be 1-{len(self.owners)}, got {self.threshold}"
            )

    def approvers(self, digest: bytes, signature: bytes) -> Set[str]:
        """Distinct owners whose signatures inside `signature` recover."""
        if len(signature) % ECDSA_SIGNATURE_LENGTH != 0:
            return set()
        found: Set[str] = set()
        for i in range(0, len(signature), ECDSA_SIGNATURE_LENGTH):
            signer = _recover(digest, signature[i:i + ECDSA_SIGNATURE_LENGTH])
            if signer in self.owners:
                found.add(signer)
        return found

    def is_valid_signature(self, digest: bytes, signature: bytes) -> bytes:
        if len(self.approvers(digest, signature)) >= self.threshold:
            return WALLET_MAGIC_VALUE
        return INVALID_VALUE
