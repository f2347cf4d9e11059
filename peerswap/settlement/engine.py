"""
PeerSwap Settlement Engine

Fills signed maker orders atomically.  One call to `swap` either performs
every transfer of the trade and marks the order EXECUTED, or changes
nothing at all.

Execution order of a swap:
  1. Deadline check (OrderExpired)
  2. Canonical order hash
  3. Signature check against the seller (InvalidSignature)
  4. OPEN → EXECUTED status transition, before any transfer
  5. Topology-specific settlement (normalization, fees, transfers)
  6. Commit of status store and asset ledger

Security:
  - ReentrancyGuard held for the whole call; a transfer callback that tries
    to swap or cancel again fails with ReentrancyError
  - Ledger snapshot + status rollback on every failure path
  - Status store is the only replay protection; a terminal order can never
    be filled again, whatever its signature
  - Fee arithmetic fails closed (ArithmeticUnderflow), never wraps
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

from ..crypto.address import normalize_address
from ..exceptions import (
    InvalidOrder,
    InvalidPayment,
    InvalidSignature,
    NotOrderMaker,
    OrderExpired,
    OrderNotOpen,
    TransferFailed,
)
from ..logger import get_logger
from .encoder import OrderEncoder
from .fees import FeeDistributor, net_of_fees
from .guard import ReentrancyGuard
from .interfaces import AssetLedger, WrapCapability
from .normalizer import CurrencyNormalizer
from .order import Order, OrderType
from .signatures import SignatureVerifier
from .status import MemoryStatusStore, OrderStatus, StatusStore

logger = get_logger(__name__)


@dataclass(frozen=True)
class SwapResult:
    """Outcome of a successful swap."""
    order_hash: bytes
    order_type: OrderType
    maker: str
    taker: str
    currency: Optional[str] = None   # None for asset-for-asset trades
    fees_paid: int = 0
    net_amount: int = 0
    wrapped: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "orderHash": "0x" + self.order_hash.hex(),
            "orderType": self.order_type.name,
            "maker": self.maker,
            "taker": self.taker,
            "currency": self.currency,
            "feesPaid": str(self.fees_paid),
            "netAmount": str(self.net_amount),
            "wrapped": self.wrapped,
        }


class SwapEngine:
    """
    Settlement engine for one deployment (address + chain id).

    Usage:

        engine = SwapEngine(address, chain_id, ledger, wrapped_token)
        digest = engine.order_hash(order)
        result = await engine.swap(order, signature, taker=taker_address)
    """

    def __init__(
        self,
        address: str,
        chain_id: int,
        ledger: AssetLedger,
        wrapper: WrapCapability,
        status_store: Optional[StatusStore] = None,
        verifier: Optional[SignatureVerifier] = None,
        *,
        domain_name: str = "PeerSwap",
        domain_version: str = "1",
        clock: Callable[[], float] = time.time,
    ):
        self.address = normalize_address(address)
        self.chain_id = chain_id
        self.ledger = ledger
        self.status_store = status_store if status_store is not None else MemoryStatusStore()
        self.verifier = verifier if verifier is not None else SignatureVerifier()
        self.encoder = OrderEncoder(self.address, chain_id, domain_name, domain_version)
        self.normalizer = CurrencyNormalizer(wrapper, custodian=self.address)
        self.fee_distributor = FeeDistributor(ledger, spender=self.address)
        self._clock = clock
        self._guard = ReentrancyGuard("swap engine")

        # --- Counters ---
        self._total_swaps: int = 0
        self._total_cancels: int = 0
        self._total_failures: int = 0

    @classmethod
    def from_config(
        cls,
        config,
        ledger: AssetLedger,
        wrapper: WrapCapability,
        status_store: Optional[StatusStore] = None,
        verifier: Optional[SignatureVerifier] = None,
        clock: Callable[[], float] = time.time,
    ) -> "SwapEngine":
        """Build an engine from a `PeerSwapConfig`."""
        return cls(
            config.engine.address,
            config.engine.chain_id,
            ledger,
            wrapper,
            status_store=status_store,
            verifier=verifier,
            domain_name=config.engine.domain_name,
            domain_version=config.engine.domain_version,
            clock=clock,
        )

    # =====================================================================
    #  Read-only views
    # =====================================================================

    def order_hash(self, order: Order) -> bytes:
        return self.encoder.hash_order(order)

    async def status_of(self, maker: str, order_hash: bytes) -> OrderStatus:
        return await self.status_store.status_of(maker, order_hash)

    async def check_order(self, order: Order, signature: bytes) -> OrderStatus:
        """
        Pre-flight check of a fill without touching any state.

        Raises the same OrderExpired / InvalidSignature / OrderNotOpen that
        `swap` would raise before settlement.
        """
        order_hash = self._authenticate(order, signature)
        status = await self.status_store.status_of(order.seller, order_hash)
        if status is not OrderStatus.OPEN:
            raise OrderNotOpen(f"Order 0x{order_hash.hex()} is {status.name}")
        return status

    def stats(self) -> Dict[str, Any]:
        return {
            "address": self.address,
            "chain_id": self.chain_id,
            "total_swaps": self._total_swaps,
            "total_cancels": self._total_cancels,
            "total_failures": self._total_failures,
        }

    # =====================================================================
    #  State-mutating entry points
    # =====================================================================

    async def swap(
        self,
        order: Order,
        signature: bytes,
        taker: str,
        value: int = 0,
    ) -> SwapResult:
        """
        Fill `order` for `taker`.

        Args:
            order: The maker's order
            signature: Maker's wire signature over the order hash
            taker: Account filling the order
            value: Native value attached to the call

        Raises:
            OrderExpired, InvalidSignature, OrderNotOpen, InvalidPayment,
            InvalidOrder, ArithmeticUnderflow, TransferFailed, ReentrancyError
        """
        taker = normalize_address(taker)
        async with self._guard:
            try:
                order_hash = self._authenticate(order, signature)
                result = await self._atomic(self._execute, order, order_hash, taker, value)
            except Exception as e:
                self._total_failures += 1
                logger.warning(f"Swap of order by {order.seller} failed: {type(e).__name__}: {e}")
                raise

        self._total_swaps += 1
        logger.info(
            f"Order 0x{result.order_hash.hex()} EXECUTED: maker={result.maker} "
            f"taker={result.taker} fees={result.fees_paid} net={result.net_amount}"
        )
        return result

    async def cancel(self, caller: str, order_hash: bytes) -> None:
        """
        Cancel an order of `caller`'s own.

        The caller is the maker key, so nobody can cancel someone else's
        order.

        Raises:
            OrderNotOpen: If the order was already executed or canceled
        """
        caller = normalize_address(caller)
        async with self._guard:
            try:
                await self._atomic(self._cancel, caller, bytes(order_hash))
            except Exception as e:
                self._total_failures += 1
                logger.warning(f"Cancel by {caller} failed: {type(e).__name__}: {e}")
                raise

        self._total_cancels += 1
        logger.info(f"Order 0x{bytes(order_hash).hex()} CANCELED by {caller}")

    async def cancel_order(self, caller: str, order: Order) -> bytes:
        """Hash and cancel an order; `caller` must be its seller."""
        if normalize_address(caller) != order.seller:
            raise NotOrderMaker(f"{caller} is not the maker of this order")
        order_hash = self.order_hash(order)
        await self.cancel(caller, order_hash)
        return order_hash

    # =====================================================================
    #  Internals
    # =====================================================================

    def _authenticate(self, order: Order, signature: bytes) -> bytes:
        now = self._clock()
        if order.is_expired(now):
            raise OrderExpired(f"Order expired at {order.expiration}, now {int(now)}")

        order_hash = self.encoder.hash_order(order)
        if not self.verifier.is_valid(order.seller, order_hash, signature):
            raise InvalidSignature(f"Invalid signature for order 0x{order_hash.hex()}")
        return order_hash

    async def _atomic(self, fn, *args):
        """Run `fn` as one unit of work over the ledger and status store."""
        snapshot_id = self.ledger.snapshot()
        try:
            result = await fn(*args)
            await self.status_store.commit()
        except BaseException:
            # cancellation and a failed commit included: nothing of this call may survive
            self.ledger.revert(snapshot_id)
            await self.status_store.rollback()
            raise
        self.ledger.release(snapshot_id)
        return result

    async def _cancel(self, caller: str, order_hash: bytes) -> None:
        await self.status_store.transition(
            caller, order_hash, OrderStatus.OPEN, OrderStatus.CANCELED
        )

    async def _execute(self, order: Order, order_hash: bytes, taker: str, value: int) -> SwapResult:
        # Closes the order before any external call can observe it as OPEN
        await self.status_store.transition(
            order.seller, order_hash, OrderStatus.OPEN, OrderStatus.EXECUTED
        )

        if order.order_type == OrderType.ASSET_FOR_ASSET:
            return await self._settle_asset_for_asset(order, order_hash, taker, value)
        elif order.order_type == OrderType.BUY_OFFER:
            return await self._settle_buy_offer(order, order_hash, taker, value)
        elif order.order_type == OrderType.SELL_OFFER:
            return await self._settle_sell_offer(order, order_hash, taker, value)
        raise InvalidOrder(f"Unknown order type: {order.order_type!r}")

    async def _settle_asset_for_asset(
        self, order: Order, order_hash: bytes, taker: str, value: int
    ) -> SwapResult:
        if value != 0:
            raise InvalidPayment("Asset-for-asset trades take no native value")
        if order.ask.is_native or order.sell.is_native:
            raise InvalidOrder("Asset-for-asset legs cannot be native currency")
        if order.fees:
            raise InvalidOrder("Asset-for-asset trades have no currency leg to pay fees from")

        await self._transfer(order.ask.token, taker, order.seller, order.ask.amount_or_id)
        await self._transfer(order.sell.token, order.seller, taker, order.sell.amount_or_id)
        return SwapResult(
            order_hash=order_hash,
            order_type=order.order_type,
            maker=order.seller,
            taker=taker,
        )

    async def _settle_buy_offer(
        self, order: Order, order_hash: bytes, taker: str, value: int
    ) -> SwapResult:
        # The maker pays the currency leg from their own balance
        if value != 0:
            raise InvalidPayment("Buy offers are paid by the maker; no native value accepted")
        if order.ask.is_native:
            raise InvalidOrder("Buy offer ask leg must be an asset")

        net = net_of_fees(order.sell.amount_or_id, order.fees)
        currency = self.normalizer.settlement_token(order.sell)

        fees_paid = await self.fee_distributor.distribute_shares(currency, order.seller, order.fees)
        await self._transfer(currency, order.seller, taker, net)
        await self._transfer(order.ask.token, taker, order.seller, order.ask.amount_or_id)
        return SwapResult(
            order_hash=order_hash,
            order_type=order.order_type,
            maker=order.seller,
            taker=taker,
            currency=currency,
            fees_paid=fees_paid,
            net_amount=net,
        )

    async def _settle_sell_offer(
        self, order: Order, order_hash: bytes, taker: str, value: int
    ) -> SwapResult:
        if order.sell.is_native:
            raise InvalidOrder("Sell offer sell leg must be an asset")

        net = net_of_fees(order.ask.amount_or_id, order.fees)
        leg = await self.normalizer.normalize(order.ask, value, payer=taker)

        fees_paid = await self.fee_distributor.distribute_shares(leg.currency, leg.payer, order.fees)
        await self._transfer(leg.currency, leg.payer, order.seller, net)
        await self._transfer(order.sell.token, order.seller, taker, order.sell.amount_or_id)
        return SwapResult(
            order_hash=order_hash,
            order_type=order.order_type,
            maker=order.seller,
            taker=taker,
            currency=leg.currency,
            fees_paid=fees_paid,
            net_amount=net,
            wrapped=leg.wrapped,
        )

    async def _transfer(self, token: str, sender: str, recipient: str, amount_or_id: int) -> None:
        ok = await self.ledger.transfer(token, self.address, sender, recipient, amount_or_id)
        if not ok:
            raise TransferFailed(
                f"Transfer of {amount_or_id} {token} from {sender} to {recipient} failed"
            )
