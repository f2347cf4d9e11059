"""
PeerSwap Crypto Module

This module provides cryptographic primitives for order signing:
- secp256k1 keys
- Keccak-256 hashing
- Address normalization (EIP-55)
- Digest signing and signer recovery
"""

from .keys import PrivateKey, PublicKey, Signature, generate_keypair
from .signing import (
    ecrecover,
    personal_message_hash,
    recover_public_key,
    sign_message_hash,
    sign_personal_digest,
)
from .hashing import keccak256, keccak256_hex, keccak256_text
from .address import (
    address_to_bytes,
    is_checksum_address,
    is_valid_address,
    is_zero_address,
    normalize_address,
    public_key_to_address,
    to_checksum_address,
)

__all__ = [
    # Keys
    "PrivateKey",
    "PublicKey",
    "Signature",
    "generate_keypair",
    # Signing
    "ecrecover",
    "personal_message_hash",
    "recover_public_key",
    "sign_message_hash",
    "sign_personal_digest",
    # Hashing
    "keccak256",
    "keccak256_hex",
    "keccak256_text",
    # Address
    "address_to_bytes",
    "is_checksum_address",
    "is_valid_address",
    "is_zero_address",
    "normalize_address",
    "public_key_to_address",
    "to_checksum_address",
]
