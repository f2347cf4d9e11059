"""
Tests for the order model and canonical order hashing.

Covers:
  - Order validation and normalization
  - Parallel fee list pairing (InvalidArrays)
  - JSON dict serialization
  - Digest determinism, field sensitivity and domain separation
"""

import pytest

from conftest import (
    CHAIN_ID,
    ENGINE_ADDRESS,
    FEE_A,
    FEE_B,
    MAKER,
    NFT_ADDRESS,
    NOW,
    USDC_ADDRESS,
    make_order,
)
from peerswap.constants import NATIVE_CURRENCY, UINT256_MAX
from peerswap.crypto import keccak256_text, normalize_address
from peerswap.exceptions import InvalidAddressError, InvalidArrays
from peerswap.settlement import Asset, FeeShare, Order, OrderEncoder, OrderType, pair_fees
from peerswap.settlement.encoder import ORDER_TYPEHASH, hash_fees


@pytest.fixture
def encoder():
    return OrderEncoder(ENGINE_ADDRESS, CHAIN_ID)


class TestOrderModel:

    def test_addresses_normalized(self):
        order = make_order(seller=MAKER.lower())
        assert order.seller == MAKER

    def test_invalid_seller_rejected(self):
        with pytest.raises(InvalidAddressError):
            make_order(seller="0x1234")

    def test_uint256_bounds(self):
        Asset(USDC_ADDRESS, UINT256_MAX)
        with pytest.raises(ValueError):
            Asset(USDC_ADDRESS, UINT256_MAX + 1)
        with pytest.raises(ValueError):
            Asset(USDC_ADDRESS, -1)
        with pytest.raises(ValueError):
            make_order(expiration=-1)

    def test_native_placeholder(self):
        assert Asset(NATIVE_CURRENCY.lower(), 5).is_native
        assert not Asset(USDC_ADDRESS, 5).is_native

    def test_order_type_coerced(self):
        assert make_order(order_type=1).order_type is OrderType.BUY_OFFER

    def test_unknown_order_type_rejected(self):
        with pytest.raises(ValueError):
            make_order(order_type=3)

    def test_fee_views(self):
        order = make_order(fees=[FeeShare(FEE_A, 10), FeeShare(FEE_B, 5)])
        assert order.total_fees == 15
        assert order.fee_recipients == (normalize_address(FEE_A), normalize_address(FEE_B))
        assert order.fee_amounts == (10, 5)

    def test_expiry_is_strictly_after_deadline(self):
        order = make_order(expiration=NOW)
        assert not order.is_expired(NOW)
        assert order.is_expired(NOW + 1)


class TestParallelFees:

    def test_equal_lengths_pair_in_order(self):
        fees = pair_fees([FEE_A, FEE_B], [10, 20])
        assert [f.amount for f in fees] == [10, 20]

    def test_empty_lists(self):
        assert pair_fees([], []) == ()

    @pytest.mark.parametrize("recipients,amounts", [
        ([FEE_A], []),
        ([], [1]),
        ([FEE_A, FEE_B], [1]),
        ([FEE_A], [1, 2]),
    ])
    def test_mismatched_lengths(self, recipients, amounts):
        with pytest.raises(InvalidArrays):
            pair_fees(recipients, amounts)

    def test_from_parallel_fees(self):
        order = Order.from_parallel_fees(
            MAKER, OrderType.SELL_OFFER,
            Asset(USDC_ADDRESS, 100), Asset(NFT_ADDRESS, 1),
            [FEE_A], [3], NOW + 10, 7,
        )
        assert order.fees == (FeeShare(FEE_A, 3),)

    def test_from_parallel_fees_mismatch(self):
        with pytest.raises(InvalidArrays):
            Order.from_parallel_fees(
                MAKER, OrderType.SELL_OFFER,
                Asset(USDC_ADDRESS, 100), Asset(NFT_ADDRESS, 1),
                [FEE_A, FEE_B], [3], NOW + 10, 7,
            )


class TestOrderSerialization:

    def test_dict_round_trip(self):
        order = make_order(fees=[FeeShare(FEE_A, 10)], salt=UINT256_MAX)
        assert Order.from_dict(order.to_dict()) == order

    def test_integers_are_strings(self):
        data = make_order(salt=UINT256_MAX).to_dict()
        assert data["salt"] == str(UINT256_MAX)
        assert data["orderType"] == "SELL_OFFER"

    def test_order_type_by_value(self):
        data = make_order().to_dict()
        data["orderType"] = 2
        assert Order.from_dict(data).order_type is OrderType.SELL_OFFER


class TestOrderHashing:

    def test_type_string(self):
        assert ORDER_TYPEHASH == keccak256_text(
            "Order(address seller,uint8 orderType,Asset ask,Asset sell,Fee[] fees,"
            "uint256 expiration,uint256 salt)"
            "Asset(address token,uint256 amountOrId)"
            "Fee(address recipient,uint256 amount)"
        )

    def test_deterministic(self, encoder):
        order = make_order(fees=[FeeShare(FEE_A, 10)])
        assert encoder.hash_order(order) == encoder.hash_order(make_order(fees=[FeeShare(FEE_A, 10)]))
        assert len(encoder.hash_order(order)) == 32

    def test_address_spelling_does_not_matter(self, encoder):
        assert encoder.hash_order(make_order(seller=MAKER.lower())) == encoder.hash_order(make_order())

    @pytest.mark.parametrize("changes", [
        {"seller": "0x" + "99" * 20},
        {"order_type": OrderType.BUY_OFFER},
        {"ask": Asset(USDC_ADDRESS, 1001)},
        {"ask": Asset(NATIVE_CURRENCY, 1000)},
        {"sell": Asset(NFT_ADDRESS, 2)},
        {"fees": [FeeShare(FEE_A, 1)]},
        {"expiration": NOW + 3601},
        {"salt": 2},
    ])
    def test_every_field_changes_the_hash(self, encoder, changes):
        assert encoder.hash_order(make_order(**changes)) != encoder.hash_order(make_order())

    def test_fee_contents_and_order_matter(self, encoder):
        a_then_b = make_order(fees=[FeeShare(FEE_A, 1), FeeShare(FEE_B, 2)])
        b_then_a = make_order(fees=[FeeShare(FEE_B, 2), FeeShare(FEE_A, 1)])
        swapped = make_order(fees=[FeeShare(FEE_A, 2), FeeShare(FEE_B, 1)])
        hashes = {encoder.hash_order(o) for o in (a_then_b, b_then_a, swapped)}
        assert len(hashes) == 3

    def test_fee_boundary_is_not_ambiguous(self):
        # One fee list cannot be re-read as another with shifted elements
        assert hash_fees([FeeShare(FEE_A, 1)]) != hash_fees([FeeShare(FEE_A, 1), FeeShare(FEE_A, 0)])
        assert hash_fees([]) != hash_fees([FeeShare("0x" + "00" * 20, 0)])

    def test_domain_separation(self):
        order = make_order()
        base = OrderEncoder(ENGINE_ADDRESS, CHAIN_ID).hash_order(order)
        assert OrderEncoder(ENGINE_ADDRESS, CHAIN_ID + 1).hash_order(order) != base
        assert OrderEncoder("0x" + "12" * 20, CHAIN_ID).hash_order(order) != base
        assert OrderEncoder(ENGINE_ADDRESS, CHAIN_ID, name="Other").hash_order(order) != base
        assert OrderEncoder(ENGINE_ADDRESS, CHAIN_ID, version="2").hash_order(order) != base

    def test_hex_form(self, encoder):
        order = make_order()
        assert encoder.hash_order_hex(order) == "0x" + encoder.hash_order(order).hex()
