"""
PeerSwap Signature Verification

Signatures travel as opaque bytes with a trailing one-byte scheme
discriminant.  The scheme set is closed:

    ILLEGAL (0)   always rejected
    EIP712  (1)   r ++ s ++ v over the raw order digest
    ETH_SIGN (2)  r ++ s ++ v over the personal-message hash of the digest
    WALLET  (3)   opaque body certified by the signer's contract wallet

Verification never raises for bad input: every malformed, unknown or
failing signature is simply not valid.
"""

from __future__ import annotations

from enum import IntEnum
from typing import Dict, Optional

from ..constants import (
    ECDSA_SIGNATURE_LENGTH,
    MIN_SIGNATURE_LENGTH,
    SECP256K1_HALF_N,
    SECP256K1_N,
    WALLET_MAGIC_VALUE,
)
from ..crypto.address import is_valid_address, is_zero_address, normalize_address
from ..crypto.keys import PrivateKey, Signature
from ..crypto.signing import ecrecover, personal_message_hash
from ..logger import get_logger
from .interfaces import ContractWallet

logger = get_logger(__name__)


class SignatureType(IntEnum):
    """Scheme discriminants.  Values are part of the wire format."""
    ILLEGAL = 0
    EIP712 = 1
    ETH_SIGN = 2
    WALLET = 3


def split_signature(signature: bytes):
    """
    Split a wire signature into (scheme, body).

    Returns:
        (SignatureType or None, body).  None for empty input or an
        out-of-range discriminant.
    """
    if len(signature) < MIN_SIGNATURE_LENGTH:
        return None, b""
    raw_type = signature[-1]
    try:
        scheme = SignatureType(raw_type)
    except ValueError:
        return None, signature[:-1]
    return scheme, signature[:-1]


def encode_signature(signature: Signature, scheme: SignatureType) -> bytes:
    if scheme not in (SignatureType.EIP712, SignatureType.ETH_SIGN):
        raise ValueError(f"{scheme.name} is not an ECDSA scheme")
    return signature.to_bytes() + bytes([scheme])


def sign_order_digest(
    private_key: PrivateKey,
    digest: bytes,
    scheme: SignatureType = SignatureType.EIP712,
) -> bytes:
    """Produce a wire signature over an order digest for an ECDSA scheme."""
    if scheme == SignatureType.EIP712:
        sig = private_key.sign_msg_hash(digest)
    elif scheme == SignatureType.ETH_SIGN:
        sig = private_key.sign_msg_hash(personal_message_hash(digest))
    else:
        raise ValueError(f"Cannot sign with scheme {scheme!r}")
    return encode_signature(sig, scheme)


def wallet_signature(body: bytes) -> bytes:
    """Wire signature handed to a contract wallet for certification."""
    return bytes(body) + bytes([SignatureType.WALLET])


class WalletRegistry:
    """Address → contract wallet lookup used by the WALLET scheme."""

    def __init__(self):
        self._wallets: Dict[str, ContractWallet] = {}

    def register(self, address: str, wallet: ContractWallet) -> None:
        self._wallets[normalize_address(address)] = wallet

    def unregister(self, address: str) -> None:
        self._wallets.pop(normalize_address(address), None)

    def get(self, address: str) -> Optional[ContractWallet]:
        return self._wallets.get(normalize_address(address))

    def __contains__(self, address: str) -> bool:
        return self.get(address) is not None

    def __len__(self) -> int:
        return len(self._wallets)


class SignatureVerifier:
    """Validates order signatures for every supported scheme."""

    def __init__(self, wallets: Optional[WalletRegistry] = None):
        self.wallets = wallets if wallets is not None else WalletRegistry()

    def is_valid(self, signer: str, digest: bytes, signature: bytes) -> bool:
        """
        Check that `signature` authorizes `digest` on behalf of `signer`.

        Args:
            signer: Address expected to have signed
            digest: 32-byte order digest
            signature: Wire signature (body ++ scheme byte)

        Returns:
            True only if the scheme is known and the signature checks out
        """
        if not signer or not is_valid_address(signer) or is_zero_address(signer):
            return False
        if len(digest) != 32:
            return False
        if not isinstance(signature, (bytes, bytearray, memoryview)):
            return False

        scheme, body = split_signature(bytes(signature))
        if scheme is None:
            return False

        signer = normalize_address(signer)
        if scheme == SignatureType.ILLEGAL:
            return False
        elif scheme == SignatureType.EIP712:
            return self._recovers_to(signer, digest, body)
        elif scheme == SignatureType.ETH_SIGN:
            return self._recovers_to(signer, personal_message_hash(digest), body)
        elif scheme == SignatureType.WALLET:
            return self._wallet_accepts(signer, digest, body)
        return False

    @staticmethod
    def _recovers_to(signer: str, msg_hash: bytes, body: bytes) -> bool:
        if len(body) != ECDSA_SIGNATURE_LENGTH:
            return False

        r = int.from_bytes(body[0:32], "big")
        s = int.from_bytes(body[32:64], "big")
        v = body[64]
        if v not in (0, 1, 27, 28):
            return False
        if not (0 < r < SECP256K1_N) or not (0 < s <= SECP256K1_HALF_N):
            return False

        try:
            recovered = ecrecover(msg_hash, v, r, s)
        except Exception as e:
            logger.debug(f"Signer recovery failed: {e}")
            return False
        return recovered == signer

    def _wallet_accepts(self, signer: str, digest: bytes, body: bytes) -> bool:
        wallet = self.wallets.get(signer)
        if wallet is None:
            return False
        try:
            result = wallet.is_valid_signature(digest, body)
        except Exception as e:
            logger.warning(f"Contract wallet {signer} rejected signature: {e}")
            return False
        return isinstance(result, (bytes, bytearray)) and bytes(result) == WALLET_MAGIC_VALUE
