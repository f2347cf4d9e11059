"""
Shared fixtures for the PeerSwap test suite.

Every test gets fresh in-memory tokens, a ledger and an engine bound to a
frozen clock.  Accounts are deterministic keys so order hashes are stable
across runs.
"""

import pytest

from peerswap.constants import NATIVE_CURRENCY
from peerswap.crypto import PrivateKey
from peerswap.settlement import (
    Asset,
    FeeShare,
    Order,
    OrderType,
    SignatureType,
    SignatureVerifier,
    SwapEngine,
    WalletRegistry,
    sign_order_digest,
)
from peerswap.tokens import FungibleToken, ItemToken, TokenLedger, WrappedNative

NOW = 1_700_000_000
CHAIN_ID = 1

ENGINE_ADDRESS = "0x" + "11" * 20
WETH_ADDRESS = "0x" + "22" * 20
USDC_ADDRESS = "0x" + "33" * 20
NFT_ADDRESS = "0x" + "44" * 20
FEE_A = "0x" + "f1" * 20
FEE_B = "0x" + "f2" * 20

MAKER_KEY = PrivateKey.from_int(0xA11CE)
TAKER_KEY = PrivateKey.from_int(0xB0B)
OTHER_KEY = PrivateKey.from_int(0xC4A1)

MAKER = MAKER_KEY.address
TAKER = TAKER_KEY.address


def make_order(
    order_type=OrderType.SELL_OFFER,
    ask=None,
    sell=None,
    fees=(),
    seller=MAKER,
    expiration=NOW + 3600,
    salt=1,
) -> Order:
    """Maker sells NFT #1 for 1000 USDC unless told otherwise."""
    return Order(
        seller=seller,
        order_type=order_type,
        ask=ask if ask is not None else Asset(USDC_ADDRESS, 1000),
        sell=sell if sell is not None else Asset(NFT_ADDRESS, 1),
        fees=tuple(fees),
        expiration=expiration,
        salt=salt,
    )


def sign(engine: SwapEngine, order: Order, key=MAKER_KEY, scheme=SignatureType.EIP712) -> bytes:
    return sign_order_digest(key, engine.order_hash(order), scheme)


@pytest.fixture
def weth():
    return WrappedNative(WETH_ADDRESS)


@pytest.fixture
def usdc():
    return FungibleToken(USDC_ADDRESS, "USD Coin", "USDC", decimals=6)


@pytest.fixture
def nft():
    return ItemToken(NFT_ADDRESS, "Test Items", "ITEM")


@pytest.fixture
def ledger(weth, usdc, nft):
    return TokenLedger([weth, usdc, nft])


@pytest.fixture
def wallets():
    return WalletRegistry()


@pytest.fixture
def engine(ledger, weth, wallets):
    return SwapEngine(
        ENGINE_ADDRESS,
        CHAIN_ID,
        ledger,
        weth,
        verifier=SignatureVerifier(wallets),
        clock=lambda: NOW,
    )


@pytest.fixture
def funded(usdc, nft, weth):
    """
    Maker owns NFT #1 and 5000 USDC, taker owns NFT #2, 5000 USDC and
    5000 WETH; both have approved the engine for everything.
    """
    for account in (MAKER, TAKER):
        usdc.mint(account, 5000)
        usdc.approve(account, ENGINE_ADDRESS, 2 ** 256 - 1)
        weth.approve(account, ENGINE_ADDRESS, 2 ** 256 - 1)
        nft.set_approval_for_all(account, ENGINE_ADDRESS)
    weth.mint(TAKER, 5000)
    nft.mint(MAKER, 1)
    nft.mint(TAKER, 2)
    return {"usdc": usdc, "nft": nft, "weth": weth}


