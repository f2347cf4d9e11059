"""
PeerSwap Canonical Order Encoder

EIP-712 typed-data hashing of orders:

    digest = keccak256(0x1901 ++ domainSeparator ++ hashStruct(order))

The domain separator binds every digest to one engine deployment
(protocol name, version, chain id, engine address), so an order signed for
one deployment never validates against another.

Variable-length data (the fee list) is hashed on its own and enters the
order struct as a single 32-byte word.  Nothing variable-length is ever
encoded inline, so two different orders cannot share an encoding.
"""

from __future__ import annotations

from typing import Sequence

from ..constants import (
    ASSET_TYPE,
    EIP712_DOMAIN_TYPE,
    EIP712_PREFIX,
    FEE_TYPE,
    ORDER_TYPE,
)
from ..crypto.address import address_to_bytes
from ..crypto.hashing import keccak256, keccak256_text
from .order import Asset, FeeShare, Order

EIP712_DOMAIN_TYPEHASH = keccak256_text(EIP712_DOMAIN_TYPE)
ORDER_TYPEHASH = keccak256_text(ORDER_TYPE)
ASSET_TYPEHASH = keccak256_text(ASSET_TYPE)
FEE_TYPEHASH = keccak256_text(FEE_TYPE)


# ---------------------------------------------------------------------------
# ABI word helpers
# ---------------------------------------------------------------------------

def uint_word(value: int) -> bytes:
    """Left-padded 32-byte big-endian word."""
    return value.to_bytes(32, "big")


def address_word(address: str) -> bytes:
    return b"\x00" * 12 + address_to_bytes(address)


# ---------------------------------------------------------------------------
# Struct hashes
# ---------------------------------------------------------------------------

def hash_asset(asset: Asset) -> bytes:
    return keccak256(
        ASSET_TYPEHASH
        + address_word(asset.token)
        + uint_word(asset.amount_or_id)
    )


def hash_fee(fee: FeeShare) -> bytes:
    return keccak256(
        FEE_TYPEHASH
        + address_word(fee.recipient)
        + uint_word(fee.amount)
    )


def hash_fees(fees: Sequence[FeeShare]) -> bytes:
    """Array hash: keccak over the concatenated element struct hashes."""
    return keccak256(b"".join(hash_fee(fee) for fee in fees))


def hash_domain(name: str, version: str, chain_id: int, verifying_contract: str) -> bytes:
    return keccak256(
        EIP712_DOMAIN_TYPEHASH
        + keccak256_text(name)
        + keccak256_text(version)
        + uint_word(chain_id)
        + address_word(verifying_contract)
    )


class OrderEncoder:
    """
    Deterministic, domain-separated order digests for one engine deployment.

    The domain separator is derived once at construction.
    """

    def __init__(
        self,
        verifying_contract: str,
        chain_id: int,
        name: str = "PeerSwap",
        version: str = "1",
    ):
        if chain_id < 0:
            raise ValueError(f"chain_id must be non-negative, got {chain_id}")
        self.verifying_contract = verifying_contract
        self.chain_id = chain_id
        self.name = name
        self.version = version
        self._domain_separator = hash_domain(name, version, chain_id, verifying_contract)

    @property
    def domain_separator(self) -> bytes:
        return self._domain_separator

    def struct_hash(self, order: Order) -> bytes:
        return keccak256(
            ORDER_TYPEHASH
            + address_word(order.seller)
            + uint_word(int(order.order_type))
            + hash_asset(order.ask)
            + hash_asset(order.sell)
            + hash_fees(order.fees)
            + uint_word(order.expiration)
            + uint_word(order.salt)
        )

    def hash_order(self, order: Order) -> bytes:
        """32-byte digest the maker signs."""
        return keccak256(EIP712_PREFIX + self._domain_separator + self.struct_hash(order))

    def hash_order_hex(self, order: Order) -> str:
        return "0x" + self.hash_order(order).hex()
