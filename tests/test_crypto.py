"""
PeerSwap Cryptography Test Suite

Covers:
- Keccak-256 hashing
- Address validation and EIP-55 normalization
- secp256k1 keys, signing and signer recovery
- Personal-message (eth_sign) digests

Run with:
    pytest tests/test_crypto.py -v
"""

import pytest

from peerswap.crypto import (
    PrivateKey,
    Signature,
    address_to_bytes,
    ecrecover,
    generate_keypair,
    is_checksum_address,
    is_valid_address,
    is_zero_address,
    keccak256,
    keccak256_hex,
    normalize_address,
    personal_message_hash,
    sign_message_hash,
    sign_personal_digest,
    to_checksum_address,
)
from peerswap.exceptions import InvalidAddressError, InvalidKeyError


class TestKeccak:

    def test_empty_input(self):
        assert keccak256_hex(b"") == (
            "0xc5d2460186f7233c927e7db2dcc703c0e500b653ca82273b7bfad8045d85a470"
        )

    def test_string_input_is_hex(self):
        assert keccak256("0xabcd") == keccak256(b"\xab\xcd")
        assert keccak256("abcd") == keccak256(b"\xab\xcd")

    def test_digest_length(self):
        assert len(keccak256(b"peerswap")) == 32


class TestAddresses:

    def test_checksum_normalization(self):
        lower = "0x5aaeb6053f3e94c9b9a09f33669435e7ef1beaed"
        assert to_checksum_address(lower) == "0x5aAeb6053F3E94C9b9A09f33669435E7Ef1BeAed"
        assert is_checksum_address(normalize_address(lower))

    def test_same_account_same_spelling(self):
        upper = "0x" + "5AAEB6053F3E94C9B9A09F33669435E7EF1BEAED"
        lower = "0x5aaeb6053f3e94c9b9a09f33669435e7ef1beaed"
        assert normalize_address(upper) == normalize_address(lower)

    @pytest.mark.parametrize("bad", ["", "0x", "0x1234", "5aaeb6053f3e94c9b9a09f33669435e7ef1beaed", "0x" + "zz" * 20])
    def test_invalid_addresses_rejected(self, bad):
        assert not is_valid_address(bad)
        with pytest.raises(InvalidAddressError):
            normalize_address(bad)

    def test_zero_address(self):
        assert is_zero_address("0x" + "00" * 20)
        assert not is_zero_address("0x" + "00" * 19 + "01")

    def test_address_to_bytes(self):
        assert address_to_bytes("0x" + "ab" * 20) == b"\xab" * 20


class TestKeys:

    def test_private_key_length_enforced(self):
        with pytest.raises(InvalidKeyError, match="32 bytes"):
            PrivateKey(b"\x01" * 31)

    def test_zero_key_rejected(self):
        with pytest.raises(InvalidKeyError):
            PrivateKey(b"\x00" * 32)

    def test_hex_round_trip(self):
        key = PrivateKey.from_int(12345)
        assert PrivateKey.from_hex(key.to_hex()) == key

    def test_known_address(self):
        # Private key 1 is the generator point
        key = PrivateKey.from_int(1)
        assert key.address == "0x7E5F4552091A69125d5DfCb7b8C2659029395Bdf"

    def test_generated_keys_differ(self):
        assert PrivateKey.generate() != PrivateKey.generate()


class TestSigning:

    def test_sign_and_recover(self):
        key = PrivateKey.from_int(0xA11CE)
        digest = keccak256(b"order")
        sig = key.sign_msg_hash(digest)
        assert ecrecover(digest, sig.v + 27, sig.r, sig.s) == key.address

    def test_signature_bytes_round_trip(self):
        key = PrivateKey.from_int(0xA11CE)
        sig = key.sign_msg_hash(keccak256(b"order"))
        raw = sig.to_bytes()
        assert len(raw) == 65
        assert raw[64] in (27, 28)
        assert Signature.from_bytes(raw).vrs == sig.vrs

    def test_signature_is_low_s(self):
        from peerswap.constants import SECP256K1_HALF_N
        key = PrivateKey.from_int(0xB0B)
        for i in range(10):
            sig = key.sign_msg_hash(keccak256(bytes([i])))
            assert sig.s <= SECP256K1_HALF_N

    def test_message_hash_must_be_32_bytes(self):
        with pytest.raises(ValueError, match="32 bytes"):
            PrivateKey.from_int(1).sign_msg_hash(b"short")

    def test_personal_message_hash(self):
        digest = keccak256(b"order")
        assert personal_message_hash(digest) == keccak256(
            b"\x19Ethereum Signed Message:\n32" + digest
        )

    def test_personal_signature_recovers_over_prefixed_hash(self):
        key = PrivateKey.from_int(0xA11CE)
        digest = keccak256(b"order")
        sig = sign_personal_digest(key, digest)
        assert ecrecover(personal_message_hash(digest), sig.v, sig.r, sig.s) == key.address
        assert ecrecover(digest, sig.v, sig.r, sig.s) != key.address

    def test_generated_keypair_verifies(self):
        priv, pub = generate_keypair()
        digest = keccak256(b"order")
        sig = sign_message_hash(priv, digest)
        assert pub.verify_msg_hash(digest, sig)
        assert pub.to_address() == priv.address
        assert not pub.verify_msg_hash(keccak256(b"other"), sig)
