"""
PeerSwap Crypto Hashing Module

Keccak-256 is the only digest used by the settlement protocol: order struct
hashes, the EIP-712 domain separator and address derivation all use it.
"""

from typing import Union

from eth_hash.auto import keccak as _eth_keccak


def _to_bytes(data: Union[bytes, str]) -> bytes:
    if isinstance(data, str):
        if data.startswith('0x') or data.startswith('0X'):
            return bytes.fromhex(data[2:])
        return bytes.fromhex(data)
    return bytes(data)


def keccak256(data: Union[bytes, str]) -> bytes:
    """
    Compute Keccak-256 hash (Ethereum standard).

    Args:
        data: Input bytes or hex string

    Returns:
        32-byte hash
    """
    return _eth_keccak(_to_bytes(data))


def keccak256_hex(data: Union[bytes, str]) -> str:
    """
    Compute Keccak-256 hash and return as hex string.

    Args:
        data: Input bytes or hex string

    Returns:
        Hex string with 0x prefix
    """
    return '0x' + keccak256(data).hex()


def keccak256_text(text: str) -> bytes:
    """Keccak-256 of a UTF-8 string (type strings, domain name/version)."""
    return _eth_keccak(text.encode('utf-8'))
