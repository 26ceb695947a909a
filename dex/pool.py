"""Two-asset constant-product liquidity pool.

Pool is the only writer of its ReserveState and LiquidityLedger. Every
state-changing operation runs as one critical section:

1. validate inputs
2. compute amounts with the pricing engine against the current reserves
3. commit reserve and share updates, then verify the pool invariants
4. move funds through the asset ledgers (pulls from the caller first, then
   pushes to the caller)
5. record and log the event

Listeners are notified after the reentrancy guard is released, so they may
call back into the pool.

Internal state is committed before any ledger is called, so a ledger that
calls back into the pool sees either fully-updated state or a ReentrantCall
rejection, never a half-applied transition. If anything fails in steps 3-4
the internal state is restored from a snapshot and completed pulls are
refunded before the error propagates.
"""

from __future__ import annotations

import hashlib
import threading
from collections import deque
from collections.abc import Callable, Iterator, Sequence
from contextlib import contextmanager
from dataclasses import dataclass

import structlog

from dex.config import DEFAULT_POOL_CONFIG, PoolConfig
from dex.errors import (
    InsufficientLiquidityBurned,
    InsufficientLiquidityMinted,
    InsufficientShares,
    InvalidAmount,
    InvariantViolation,
    ReentrantCall,
    SlippageExceeded,
    ZeroAmount,
)
from dex.ledger import AssetLedger
from dex.liquidity import LiquidityLedger
from dex.models.events import (
    LiquidityAdded,
    LiquidityRemoved,
    PoolEvent,
    PoolSnapshot,
    Swap,
    SwapDirection,
)
from dex.models.types import normalize_address
from dex.pricing import ConstantProductPricing
from dex.safe_int import UINT256_MAX, S
from dex.state import ReserveState

logger = structlog.get_logger()

EventListener = Callable[[PoolEvent], None]


def derive_pool_address(symbol_a: str, symbol_b: str) -> str:
    """Deterministic custody address for a pool over two asset symbols."""
    digest = hashlib.sha256(f"pool:{symbol_a}:{symbol_b}".encode()).hexdigest()
    return "0x" + digest[:40]


def _grown_reserve(reserve: int, amount: int, symbol: str) -> int:
    """Reserve after taking in amount; rejects deposits the reserve cannot hold."""
    grown = S(reserve) + S(amount)
    if grown > UINT256_MAX:
        raise InvalidAmount(f"{symbol} reserve {reserve} cannot take {amount} more")
    return grown.value


@dataclass(frozen=True)
class _Transfer:
    """One leg of fund movement between the pool and a counterparty."""

    ledger: AssetLedger
    account: str
    amount: int


class Pool:
    """Constant-product pool over two asset ledgers.

    The asset pair and fee are fixed for the lifetime of the pool. All
    state-changing calls are serialized by a per-pool lock and guarded
    against reentrancy.

    Args:
        asset_a: Ledger of asset A
        asset_b: Ledger of asset B
        address: Account the pool custodies funds under on both ledgers.
            Defaults to an address derived from the asset symbols.
        config: Fee and price-scale parameters
    """

    def __init__(
        self,
        asset_a: AssetLedger,
        asset_b: AssetLedger,
        *,
        address: str | None = None,
        config: PoolConfig = DEFAULT_POOL_CONFIG,
    ) -> None:
        if asset_a is asset_b:
            raise ValueError("A pool needs two distinct asset ledgers")

        self._asset_a = asset_a
        self._asset_b = asset_b
        self._config = config
        self._pricing = ConstantProductPricing(config)
        self._address = normalize_address(
            address or derive_pool_address(asset_a.symbol, asset_b.symbol)
        )

        self._state = ReserveState()
        self._liquidity = LiquidityLedger(self._state)

        self._lock = threading.RLock()
        self._entered = False
        self._events: deque[PoolEvent] = deque(maxlen=config.event_history)
        self._pending: deque[PoolEvent] = deque()
        self._listeners: list[EventListener] = []

    def __repr__(self) -> str:
        return (
            f"Pool({self._asset_a.symbol}/{self._asset_b.symbol}, "
            f"reserves=({self._state.reserve_a}, {self._state.reserve_b}), "
            f"shares={self._state.total_liquidity})"
        )

    # --- Bound parameters ---

    @property
    def address(self) -> str:
        return self._address

    @property
    def asset_a(self) -> AssetLedger:
        return self._asset_a

    @property
    def asset_b(self) -> AssetLedger:
        return self._asset_b

    @property
    def config(self) -> PoolConfig:
        return self._config

    @property
    def pricing(self) -> ConstantProductPricing:
        return self._pricing

    # --- Liquidity ---

    def add_liquidity(self, provider: str, amount_a: int, amount_b: int) -> LiquidityAdded:
        """Deposit both assets and mint shares to provider.

        The first deposit sets the pool ratio. Later deposits are fitted to
        the current ratio and only the amounts actually used are pulled from
        the provider.

        Args:
            provider: Account depositing (must have approved the pool on both ledgers)
            amount_a: Maximum amount of asset A to deposit
            amount_b: Maximum amount of asset B to deposit

        Returns:
            The emitted LiquidityAdded event

        Raises:
            ZeroAmount: If either amount is zero
            InvalidAmount: If the deposit would overflow a reserve or the share supply
            InsufficientLiquidityMinted: If the deposit mints no shares
            TransferFailed: If the provider's balance or allowance is insufficient
        """
        provider = normalize_address(provider)
        with self._critical_section("add_liquidity"):
            if amount_a <= 0 or amount_b <= 0:
                raise ZeroAmount(
                    f"Liquidity amounts must both be positive: ({amount_a}, {amount_b})"
                )

            state = self._state
            used_a, used_b = self._pricing.quote_liquidity(
                amount_a, amount_b, state.reserve_a, state.reserve_b
            )
            minted = self._pricing.liquidity_to_mint(
                used_a, used_b, state.reserve_a, state.reserve_b, state.total_liquidity
            )
            if minted <= 0:
                raise InsufficientLiquidityMinted(
                    f"Deposit ({used_a}, {used_b}) mints no shares against "
                    f"reserves ({state.reserve_a}, {state.reserve_b})"
                )
            new_a = _grown_reserve(state.reserve_a, used_a, self._asset_a.symbol)
            new_b = _grown_reserve(state.reserve_b, used_b, self._asset_b.symbol)
            if state.total_liquidity + minted > UINT256_MAX:
                raise InvalidAmount(
                    f"Minting {minted} shares exceeds the uint256 share supply"
                )

            def apply() -> None:
                state.reserve_a, state.reserve_b = new_a, new_b
                self._liquidity.mint(provider, minted)

            event = LiquidityAdded(
                provider=provider,
                amount_a=used_a,
                amount_b=used_b,
                liquidity_minted=minted,
            )
            self._commit(
                "add_liquidity",
                apply,
                pulls=[
                    _Transfer(self._asset_a, provider, used_a),
                    _Transfer(self._asset_b, provider, used_b),
                ],
                event=event,
            )
            return event

    def remove_liquidity(self, provider: str, share_amount: int) -> LiquidityRemoved:
        """Burn shares and pay out the provider's proportional reserves.

        Payouts floor, so rounding dust stays in the pool.

        Raises:
            ZeroAmount: If share_amount is zero
            InsufficientShares: If provider holds fewer than share_amount shares
            InsufficientLiquidityBurned: If either payout rounds to zero
        """
        provider = normalize_address(provider)
        with self._critical_section("remove_liquidity"):
            if share_amount <= 0:
                raise ZeroAmount(f"Share amount must be positive: {share_amount}")

            balance = self._liquidity.balance_of(provider)
            if share_amount > balance:
                raise InsufficientShares(
                    f"{provider} holds {balance} shares, cannot remove {share_amount}"
                )

            state = self._state
            amount_a, amount_b = self._pricing.amounts_for_shares(
                share_amount, state.reserve_a, state.reserve_b, state.total_liquidity
            )
            if amount_a == 0 or amount_b == 0:
                raise InsufficientLiquidityBurned(
                    f"Burning {share_amount} of {state.total_liquidity} shares "
                    f"returns ({amount_a}, {amount_b})"
                )

            def apply() -> None:
                self._liquidity.burn(provider, share_amount)
                state.reserve_a = (S(state.reserve_a) - S(amount_a)).value
                state.reserve_b = (S(state.reserve_b) - S(amount_b)).value

            event = LiquidityRemoved(
                provider=provider,
                amount_a=amount_a,
                amount_b=amount_b,
                liquidity_burned=share_amount,
            )
            self._commit(
                "remove_liquidity",
                apply,
                pushes=[
                    _Transfer(self._asset_a, provider, amount_a),
                    _Transfer(self._asset_b, provider, amount_b),
                ],
                event=event,
            )
            return event

    # --- Swaps ---

    def swap_a_for_b(self, trader: str, amount_in: int, min_amount_out: int = 0) -> Swap:
        """Sell amount_in of asset A for asset B."""
        return self.swap(trader, SwapDirection.A_TO_B, amount_in, min_amount_out)

    def swap_b_for_a(self, trader: str, amount_in: int, min_amount_out: int = 0) -> Swap:
        """Sell amount_in of asset B for asset A."""
        return self.swap(trader, SwapDirection.B_TO_A, amount_in, min_amount_out)

    def swap(
        self,
        trader: str,
        direction: SwapDirection | str,
        amount_in: int,
        min_amount_out: int = 0,
    ) -> Swap:
        """Sell an exact input of one asset for the other.

        Args:
            trader: Account selling (must have approved the pool on the input ledger)
            direction: Which asset is sold
            amount_in: Exact input amount
            min_amount_out: Reject the swap if it would pay out less than this

        Returns:
            The emitted Swap event

        Raises:
            InvalidAmount: If amount_in is zero or would overflow the input reserve
            InsufficientLiquidity: If the pool has an empty side
            SlippageExceeded: If the output is below min_amount_out
            InvariantViolation: If the swap would decrease reserve_a * reserve_b
            TransferFailed: If the trader's balance or allowance is insufficient
        """
        trader = normalize_address(trader)
        direction = SwapDirection(direction)
        with self._critical_section("swap"):
            if amount_in <= 0:
                raise InvalidAmount(f"Swap input must be positive: {amount_in}")

            state = self._state
            a_to_b = direction is SwapDirection.A_TO_B
            if a_to_b:
                ledger_in, ledger_out = self._asset_a, self._asset_b
                reserve_in, reserve_out = state.reserve_a, state.reserve_b
            else:
                ledger_in, ledger_out = self._asset_b, self._asset_a
                reserve_in, reserve_out = state.reserve_b, state.reserve_a

            new_in = _grown_reserve(reserve_in, amount_in, ledger_in.symbol)
            amount_out = self._pricing.get_amount_out(amount_in, reserve_in, reserve_out)
            if amount_out < min_amount_out:
                raise SlippageExceeded(f"Swap output {amount_out} is below minimum {min_amount_out}")

            new_out = (S(reserve_out) - S(amount_out)).value

            def apply() -> None:
                if a_to_b:
                    state.reserve_a, state.reserve_b = new_in, new_out
                else:
                    state.reserve_b, state.reserve_a = new_in, new_out

            event = Swap(
                trader=trader,
                direction=direction,
                asset_in=ledger_in.symbol,
                asset_out=ledger_out.symbol,
                amount_in=amount_in,
                amount_out=amount_out,
            )
            self._commit(
                "swap",
                apply,
                pulls=[_Transfer(ledger_in, trader, amount_in)],
                pushes=[_Transfer(ledger_out, trader, amount_out)],
                event=event,
                check_k=True,
            )
            return event

    # --- Read-only accessors ---

    def get_reserves(self) -> tuple[int, int]:
        """Return (reserve_a, reserve_b)."""
        with self._lock:
            return self._state.reserve_a, self._state.reserve_b

    def get_price(self) -> int:
        """Price of A in B scaled by config.price_scale, or 0 for an empty pool."""
        with self._lock:
            return self._pricing.get_price(self._state.reserve_a, self._state.reserve_b)

    def get_amount_out(self, amount_in: int, reserve_in: int, reserve_out: int) -> int:
        """Pure quote against arbitrary reserves, using this pool's fee."""
        return self._pricing.get_amount_out(amount_in, reserve_in, reserve_out)

    def get_amount_in(self, amount_out: int, reserve_in: int, reserve_out: int) -> int:
        """Pure exact-output quote against arbitrary reserves, using this pool's fee."""
        return self._pricing.get_amount_in(amount_out, reserve_in, reserve_out)

    def quote_swap(self, direction: SwapDirection | str, amount_in: int) -> int:
        """Output a swap of amount_in would receive against the current reserves."""
        direction = SwapDirection(direction)
        reserve_a, reserve_b = self.get_reserves()
        if direction is SwapDirection.A_TO_B:
            return self._pricing.get_amount_out(amount_in, reserve_a, reserve_b)
        return self._pricing.get_amount_out(amount_in, reserve_b, reserve_a)

    @property
    def total_liquidity(self) -> int:
        with self._lock:
            return self._state.total_liquidity

    def liquidity_of(self, provider: str) -> int:
        """Share balance of provider."""
        with self._lock:
            return self._liquidity.balance_of(provider)

    def positions(self) -> dict[str, int]:
        with self._lock:
            return self._liquidity.positions()

    @property
    def events(self) -> tuple[PoolEvent, ...]:
        """The most recent config.event_history events, oldest first."""
        with self._lock:
            return tuple(self._events)

    def snapshot(self) -> PoolSnapshot:
        with self._lock:
            return PoolSnapshot(
                address=self._address,
                asset_a=self._asset_a.symbol,
                asset_b=self._asset_b.symbol,
                reserve_a=self._state.reserve_a,
                reserve_b=self._state.reserve_b,
                total_liquidity=self._state.total_liquidity,
                price=self._pricing.get_price(self._state.reserve_a, self._state.reserve_b),
                price_scale=self._config.price_scale,
                fee_bps=self._config.fee_bps,
            )

    # --- Event subscription ---

    def subscribe(self, listener: EventListener) -> None:
        """Call listener with every event emitted after this point."""
        with self._lock:
            self._listeners.append(listener)

    def unsubscribe(self, listener: EventListener) -> None:
        with self._lock:
            self._listeners.remove(listener)

    # --- Internals ---

    @contextmanager
    def _critical_section(self, operation: str) -> Iterator[None]:
        with self._lock:
            if self._entered:
                logger.warning(
                    "reentrant_call_rejected",
                    pool=self._address,
                    operation=operation,
                )
                raise ReentrantCall(
                    f"{operation} called while another operation on pool "
                    f"{self._address} is in progress"
                )
            self._entered = True
            try:
                yield
            finally:
                self._entered = False
            self._notify_listeners()

    def _commit(
        self,
        operation: str,
        apply: Callable[[], None],
        *,
        pulls: Sequence[_Transfer] = (),
        pushes: Sequence[_Transfer] = (),
        event: PoolEvent,
        check_k: bool = False,
    ) -> None:
        """Apply a state change, move funds, emit event; all or nothing."""
        reserves_before = self._state.snapshot()
        positions_before = self._liquidity.snapshot()
        try:
            apply()
            self._verify(reserves_before, check_k=check_k)
            self._check_custody(pushes)
            self._settle(pulls, pushes)
        except Exception as err:
            self._state.restore(reserves_before)
            self._liquidity.restore(positions_before)
            logger.warning(
                "pool_operation_rolled_back",
                pool=self._address,
                operation=operation,
                error=type(err).__name__,
                detail=str(err),
            )
            raise

        self._emit(event)

    def _verify(self, before: ReserveState, *, check_k: bool) -> None:
        self._state.check_invariants()
        self._liquidity.verify_conservation()
        if check_k and self._state.k < before.k:
            raise InvariantViolation(
                f"Swap would decrease k from {before.k} to {self._state.k}"
            )

    def _check_custody(self, pushes: Sequence[_Transfer]) -> None:
        # Every payout must be covered by custody before the first one is made
        for push in pushes:
            held = push.ledger.balance_of(self._address)
            if held < push.amount:
                raise InvariantViolation(
                    f"Pool holds {held} {push.ledger.symbol}, cannot pay out {push.amount}"
                )

    def _settle(self, pulls: Sequence[_Transfer], pushes: Sequence[_Transfer]) -> None:
        completed: list[_Transfer] = []
        try:
            for pull in pulls:
                if pull.amount:
                    pull.ledger.transfer_from(self._address, pull.account, self._address, pull.amount)
                completed.append(pull)
            for push in pushes:
                if push.amount:
                    push.ledger.transfer(self._address, push.account, push.amount)
        except Exception:
            # Refund what was already pulled before the failure surfaces
            for pull in reversed(completed):
                if pull.amount:
                    pull.ledger.transfer(self._address, pull.account, pull.amount)
            raise

    def _emit(self, event: PoolEvent) -> None:
        self._events.append(event)
        self._pending.append(event)
        logger.info(
            "pool_event",
            pool=self._address,
            kind=type(event).__name__,
            reserve_a=self._state.reserve_a,
            reserve_b=self._state.reserve_b,
            total_liquidity=self._state.total_liquidity,
            **event.model_dump(mode="json"),
        )

    def _notify_listeners(self) -> None:
        # Runs with the reentrancy flag cleared, so listeners may call back in
        while self._pending:
            event = self._pending.popleft()
            for listener in list(self._listeners):
                try:
                    listener(event)
                except Exception:
                    logger.exception(
                        "event_listener_failed",
                        pool=self._address,
                        kind=type(event).__name__,
                    )


__all__ = [
    "Pool",
    "derive_pool_address",
]
