"""
Reference token ledger tests: balances, allowances, item ownership and
ledger snapshots.
"""

import pytest

from conftest import ENGINE_ADDRESS, MAKER, NFT_ADDRESS, TAKER, USDC_ADDRESS
from peerswap.settlement import AssetLedger, WrapCapability
from peerswap.tokens import (
    FungibleToken,
    InsufficientAllowanceError,
    InsufficientBalanceError,
    NotItemOwnerError,
    TokenError,
    TokenLedger,
)


class TestFungibleToken:

    def test_metadata_validated(self):
        with pytest.raises(TokenError):
            FungibleToken(USDC_ADDRESS, "", "USDC")
        with pytest.raises(TokenError):
            FungibleToken(USDC_ADDRESS, "USD Coin", "USDC", decimals=19)

    @pytest.mark.asyncio
    async def test_owner_moves_own_funds_without_allowance(self, usdc):
        usdc.mint(MAKER, 10)
        await usdc.transfer_from(MAKER, MAKER, TAKER, 4)
        assert usdc.balance_of(MAKER) == 6
        assert usdc.balance_of(TAKER) == 4

    @pytest.mark.asyncio
    async def test_allowance_consumed(self, usdc):
        usdc.mint(MAKER, 10)
        usdc.approve(MAKER, ENGINE_ADDRESS, 6)
        await usdc.transfer_from(ENGINE_ADDRESS, MAKER, TAKER, 4)
        assert usdc.allowance(MAKER, ENGINE_ADDRESS) == 2
        with pytest.raises(InsufficientAllowanceError):
            await usdc.transfer_from(ENGINE_ADDRESS, MAKER, TAKER, 3)

    @pytest.mark.asyncio
    async def test_unlimited_allowance_not_consumed(self, usdc):
        usdc.mint(MAKER, 10)
        usdc.approve(MAKER, ENGINE_ADDRESS, 2 ** 256 - 1)
        await usdc.transfer_from(ENGINE_ADDRESS, MAKER, TAKER, 4)
        assert usdc.allowance(MAKER, ENGINE_ADDRESS) == 2 ** 256 - 1

    @pytest.mark.asyncio
    async def test_insufficient_balance(self, usdc):
        usdc.mint(MAKER, 3)
        with pytest.raises(InsufficientBalanceError):
            await usdc.transfer_from(MAKER, MAKER, TAKER, 4)
        assert usdc.balance_of(MAKER) == 3


class TestItemToken:

    @pytest.mark.asyncio
    async def test_operator_transfer(self, nft):
        nft.mint(MAKER, 1)
        nft.set_approval_for_all(MAKER, ENGINE_ADDRESS)
        assert nft.is_approved_for_all(MAKER, ENGINE_ADDRESS)
        await nft.transfer_from(ENGINE_ADDRESS, MAKER, TAKER, 1)
        assert nft.owner_of(1) == TAKER
        assert nft.balance_of(TAKER) == 1

    @pytest.mark.asyncio
    async def test_single_item_approval_cleared_on_transfer(self, nft):
        nft.mint(MAKER, 1)
        nft.approve(MAKER, ENGINE_ADDRESS, 1)
        await nft.transfer_from(ENGINE_ADDRESS, MAKER, TAKER, 1)
        assert nft.get_approved(1) is None

    @pytest.mark.asyncio
    async def test_unapproved_spender(self, nft):
        nft.mint(MAKER, 1)
        with pytest.raises(NotItemOwnerError):
            await nft.transfer_from(ENGINE_ADDRESS, MAKER, TAKER, 1)

    @pytest.mark.asyncio
    async def test_wrong_sender(self, nft):
        nft.mint(MAKER, 1)
        with pytest.raises(NotItemOwnerError):
            await nft.transfer_from(TAKER, TAKER, MAKER, 1)

    def test_double_mint(self, nft):
        nft.mint(MAKER, 1)
        with pytest.raises(TokenError):
            nft.mint(TAKER, 1)

    @pytest.mark.asyncio
    async def test_receive_hook_runs_after_ownership_change(self, nft):
        seen = []

        async def hook(operator, sender, item_id):
            seen.append((operator, sender, item_id, nft.owner_of(item_id)))

        nft.mint(MAKER, 1)
        nft.on_receive(TAKER, hook)
        await nft.transfer_from(MAKER, MAKER, TAKER, 1)
        assert seen == [(MAKER, MAKER, 1, TAKER)]


class TestTokenLedger:

    def test_satisfies_capabilities(self, ledger, weth):
        assert isinstance(ledger, AssetLedger)
        assert isinstance(weth, WrapCapability)

    def test_duplicate_registration(self, ledger, usdc):
        with pytest.raises(ValueError):
            ledger.register(usdc)

    @pytest.mark.asyncio
    async def test_unknown_token_refused(self, ledger):
        assert await ledger.transfer("0x" + "99" * 20, MAKER, MAKER, TAKER, 1) is False

    @pytest.mark.asyncio
    async def test_token_error_becomes_refusal(self, ledger):
        assert await ledger.transfer(USDC_ADDRESS, MAKER, MAKER, TAKER, 1) is False

    @pytest.mark.asyncio
    async def test_snapshot_revert(self, ledger, usdc, nft):
        usdc.mint(MAKER, 10)
        nft.mint(MAKER, 1)
        snap = ledger.snapshot()

        assert await ledger.transfer(USDC_ADDRESS, MAKER, MAKER, TAKER, 10)
        assert await ledger.transfer(NFT_ADDRESS, MAKER, MAKER, TAKER, 1)
        usdc.mint(TAKER, 99)
        ledger.revert(snap)

        assert usdc.balance_of(MAKER) == 10
        assert usdc.balance_of(TAKER) == 0
        assert usdc.total_supply == 10
        assert nft.owner_of(1) == MAKER

    @pytest.mark.asyncio
    async def test_nested_snapshots(self, ledger, usdc):
        usdc.mint(MAKER, 10)
        outer = ledger.snapshot()
        await ledger.transfer(USDC_ADDRESS, MAKER, MAKER, TAKER, 3)
        inner = ledger.snapshot()
        await ledger.transfer(USDC_ADDRESS, MAKER, MAKER, TAKER, 3)

        ledger.revert(inner)
        assert usdc.balance_of(TAKER) == 3
        ledger.revert(outer)
        assert usdc.balance_of(TAKER) == 0

    def test_release_keeps_state_and_drops_snapshot(self, ledger, usdc):
        snap = ledger.snapshot()
        usdc.mint(MAKER, 10)
        ledger.release(snap)
        assert usdc.balance_of(MAKER) == 10
        with pytest.raises(ValueError, match="Invalid snapshot ID"):
            ledger.revert(snap)
