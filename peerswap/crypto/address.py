"""
PeerSwap Crypto Address Module

Ethereum-style 20-byte addresses with EIP-55 checksums. Every address that
enters an order, a status key or a ledger goes through `normalize_address`
so that the same account never appears under two spellings.
"""

from eth_utils import (
    is_address,
    is_checksum_address as _is_checksum_address,
    to_canonical_address,
    to_checksum_address as _to_checksum_address,
)

from ..constants import ZERO_ADDRESS
from ..exceptions import InvalidAddressError
from .hashing import keccak256


def is_valid_address(address: str) -> bool:
    """Check that `address` is a 0x-prefixed 20-byte hex address."""
    return isinstance(address, str) and address.startswith('0x') and is_address(address)


def is_checksum_address(address: str) -> bool:
    return _is_checksum_address(address)


def to_checksum_address(address: str) -> str:
    """
    Convert an address to EIP-55 checksum format.

    Raises:
        InvalidAddressError: If the address is malformed
    """
    if not is_valid_address(address):
        raise InvalidAddressError(f"Invalid address: {address!r}")
    return _to_checksum_address(address)


def normalize_address(address: str) -> str:
    """Alias of `to_checksum_address`, used at every module boundary."""
    return to_checksum_address(address)


def is_zero_address(address: str) -> bool:
    return is_valid_address(address) and address.lower() == ZERO_ADDRESS


def address_to_bytes(address: str) -> bytes:
    """20 raw bytes of an address."""
    return to_canonical_address(to_checksum_address(address))


def public_key_to_address(public_key) -> str:
    """
    Derive address from a secp256k1 public key.

    Last 20 bytes of keccak256 over the 64-byte uncompressed key.

    Args:
        public_key: PublicKey instance or bytes

    Returns:
        Checksum address
    """
    if hasattr(public_key, 'to_bytes'):
        pub_bytes = public_key.to_bytes()
    else:
        pub_bytes = public_key

    # Remove 04 prefix if present (uncompressed secp256k1)
    if len(pub_bytes) == 65 and pub_bytes[0] == 0x04:
        pub_bytes = pub_bytes[1:]

    if len(pub_bytes) != 64:
        raise ValueError(f"secp256k1 public key must be 64 bytes, got {len(pub_bytes)}")
    return _to_checksum_address(keccak256(pub_bytes)[-20:])
