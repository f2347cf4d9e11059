"""
PeerSwap Crypto Signing Module

Digest signing and signer recovery using secp256k1.
"""

from ..constants import PERSONAL_MESSAGE_PREFIX
from .hashing import keccak256
from .keys import PrivateKey, PublicKey, Signature


def personal_message_hash(digest: bytes) -> bytes:
    """
    Hash a 32-byte digest the way wallets do for personal_sign.

    keccak256("\\x19Ethereum Signed Message:\\n32" ++ digest)
    """
    if len(digest) != 32:
        raise ValueError(f"Digest must be 32 bytes, got {len(digest)}")
    return keccak256(PERSONAL_MESSAGE_PREFIX + digest)


def sign_message_hash(private_key: PrivateKey, msg_hash: bytes) -> Signature:
    """Sign a 32-byte hash as-is."""
    return private_key.sign_msg_hash(msg_hash)


def sign_personal_digest(private_key: PrivateKey, digest: bytes) -> Signature:
    """Sign a 32-byte digest with the personal message prefix applied."""
    return private_key.sign_msg_hash(personal_message_hash(digest))


def recover_public_key(msg_hash: bytes, signature: Signature) -> PublicKey:
    return PublicKey.recover_from_msg_hash(msg_hash, signature)


def ecrecover(msg_hash: bytes, v: int, r: int, s: int) -> str:
    """
    Recover signer address from signature components.

    Args:
        msg_hash: 32-byte message hash
        v: Recovery parameter (27 or 28)
        r: R component
        s: S component

    Returns:
        Recovered checksum address
    """
    signature = Signature.from_vrs(v, r, s)
    return recover_public_key(msg_hash, signature).to_address()
