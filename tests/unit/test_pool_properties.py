"""Randomized operation sequences checked against the pool invariants.

Each test replays a seeded sequence so failures are reproducible.
"""

import random

import pytest

from dex.errors import PoolError
from dex.models.events import LiquidityAdded, LiquidityRemoved, Swap, SwapDirection
from dex.pool import Pool
from tests.helpers import ALICE, BOB, CAROL, E18, fund, ledger_balances, make_pool

ACCOUNTS = (ALICE, BOB, CAROL)
SEEDS = [0, 1, 7, 42, 1337]
STEPS = 200
DUST = 10**6


def _funded_pool() -> Pool:
    pool = make_pool()
    for account in ACCOUNTS:
        fund(pool, account)
    return pool


def _random_step(pool: Pool, rng: random.Random):
    account = rng.choice(ACCOUNTS)
    roll = rng.random()
    if roll < 0.35:
        return pool.add_liquidity(
            account, rng.randint(1, 1_000) * E18, rng.randint(1, 1_000) * E18
        )
    if roll < 0.5:
        shares = pool.liquidity_of(account)
        return pool.remove_liquidity(account, rng.randint(1, shares) if shares else 1)
    direction = rng.choice(list(SwapDirection))
    return pool.swap(account, direction, rng.randint(1, 500) * E18 // rng.randint(1, 1_000))


def _assert_consistent(pool: Pool) -> None:
    reserve_a, reserve_b = pool.get_reserves()
    positions = pool.positions()

    assert sum(positions.values()) == pool.total_liquidity
    assert all(shares > 0 for shares in positions.values())
    assert (pool.total_liquidity == 0) == (reserve_a == 0 and reserve_b == 0)
    if pool.total_liquidity:
        assert reserve_a > 0 and reserve_b > 0

    # Nothing is donated, so custody tracks reserves exactly
    assert ledger_balances(pool)[pool.address] == (reserve_a, reserve_b)

    # No asset is created or destroyed by pool operations
    for ledger in (pool.asset_a, pool.asset_b):
        held = sum(ledger.balance_of(account) for account in ACCOUNTS)
        assert held + ledger.balance_of(pool.address) == ledger.total_supply


@pytest.mark.parametrize("seed", SEEDS)
def test_invariants_hold_across_random_sequences(seed):
    rng = random.Random(seed)
    pool = _funded_pool()

    for _ in range(STEPS):
        before = (pool.get_reserves(), pool.positions(), len(pool.events))
        try:
            _random_step(pool, rng)
        except PoolError:
            # Rejected operations leave no trace
            assert (pool.get_reserves(), pool.positions(), len(pool.events)) == before
        _assert_consistent(pool)


@pytest.mark.parametrize("seed", SEEDS)
def test_swaps_never_decrease_k(seed):
    rng = random.Random(seed)
    pool = _funded_pool()
    for account in ACCOUNTS:
        fund(pool, account, 10**30)
    pool.add_liquidity(ALICE, 10_000 * E18, 25_000 * E18)

    for _ in range(STEPS):
        reserve_a, reserve_b = pool.get_reserves()
        k_before = reserve_a * reserve_b
        direction = rng.choice(list(SwapDirection))
        amount_in = rng.randint(1, 10**6) * rng.choice([1, 10**9, E18])

        event = pool.swap(rng.choice(ACCOUNTS), direction, amount_in)

        reserve_a, reserve_b = pool.get_reserves()
        assert reserve_a * reserve_b >= k_before
        assert reserve_a > 0 and reserve_b > 0
        assert isinstance(event, Swap)


@pytest.mark.parametrize("seed", SEEDS)
def test_deposits_preserve_ratio(seed):
    """Deposits into a non-empty pool never move the price by more than rounding."""
    rng = random.Random(seed)
    pool = _funded_pool()
    pool.add_liquidity(ALICE, 3_000 * E18, 7_000 * E18)

    for _ in range(50):
        reserve_a, reserve_b = pool.get_reserves()
        event = pool.add_liquidity(
            rng.choice(ACCOUNTS), rng.randint(1, 10**4) * E18, rng.randint(1, 10**4) * E18
        )
        assert isinstance(event, LiquidityAdded)

        # used_b = floor(used_a * reserve_b / reserve_a) (or the mirror); the
        # cross products can differ by at most one reserve's worth of rounding
        new_a, new_b = pool.get_reserves()
        assert abs(new_a * reserve_b - new_b * reserve_a) <= max(reserve_a, reserve_b)


@pytest.mark.parametrize("seed", SEEDS)
def test_withdrawals_are_proportional(seed):
    """With no swaps in between, every provider withdraws what they put in, up to rounding dust."""
    rng = random.Random(seed)
    pool = _funded_pool()

    deposited: dict[str, list[int]] = {account: [0, 0] for account in ACCOUNTS}
    for _ in range(30):
        account = rng.choice(ACCOUNTS)
        event = pool.add_liquidity(
            account, rng.randint(1, 10**4) * E18, rng.randint(1, 10**4) * E18
        )
        deposited[account][0] += event.amount_a
        deposited[account][1] += event.amount_b

    withdrawn = [0, 0]
    for account in ACCOUNTS:
        shares = pool.liquidity_of(account)
        if not shares:
            continue
        event = pool.remove_liquidity(account, shares)
        assert isinstance(event, LiquidityRemoved)
        # Floored mints leave sub-share dust behind, shared by all holders
        assert abs(event.amount_a - deposited[account][0]) <= DUST
        assert abs(event.amount_b - deposited[account][1]) <= DUST
        withdrawn[0] += event.amount_a
        withdrawn[1] += event.amount_b

    assert withdrawn[0] == sum(amounts[0] for amounts in deposited.values())
    assert withdrawn[1] == sum(amounts[1] for amounts in deposited.values())
    assert pool.total_liquidity == 0
    assert pool.get_reserves() == (0, 0)
