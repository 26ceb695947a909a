"""Tests for ReserveState and LiquidityLedger bookkeeping."""

import pytest

from dex.errors import InsufficientShares, InvariantViolation, ZeroAmount
from dex.liquidity import LiquidityLedger
from dex.state import ReserveState
from tests.helpers import ALICE, BOB


class TestReserveState:
    """Tests for reserve invariants and snapshots."""

    def test_starts_empty(self):
        state = ReserveState()
        assert (state.reserve_a, state.reserve_b, state.total_liquidity) == (0, 0, 0)
        assert state.is_empty
        assert state.k == 0
        state.check_invariants()

    def test_funded_state_is_valid(self):
        state = ReserveState(reserve_a=100, reserve_b=200, total_liquidity=141)
        state.check_invariants()
        assert state.k == 20_000

    def test_reserves_without_shares_is_violation(self):
        with pytest.raises(InvariantViolation):
            ReserveState(reserve_a=5, reserve_b=0, total_liquidity=0).check_invariants()

    def test_shares_with_empty_side_is_violation(self):
        with pytest.raises(InvariantViolation):
            ReserveState(reserve_a=100, reserve_b=0, total_liquidity=10).check_invariants()

    def test_negative_is_violation(self):
        with pytest.raises(InvariantViolation):
            ReserveState(reserve_a=-1, reserve_b=5, total_liquidity=3).check_invariants()

    def test_snapshot_is_independent(self):
        state = ReserveState(reserve_a=100, reserve_b=200, total_liquidity=141)
        snapshot = state.snapshot()
        state.reserve_a = 1

        assert snapshot.reserve_a == 100
        state.restore(snapshot)
        assert state == ReserveState(reserve_a=100, reserve_b=200, total_liquidity=141)


class TestLiquidityLedger:
    """Tests for share positions."""

    def test_mint_updates_position_and_supply(self):
        state = ReserveState()
        ledger = LiquidityLedger(state)

        ledger.mint(ALICE, 100)
        ledger.mint(BOB, 50)
        ledger.mint(ALICE, 10)

        assert ledger.balance_of(ALICE) == 110
        assert ledger.balance_of(BOB) == 50
        assert state.total_liquidity == 160
        ledger.verify_conservation()

    def test_addresses_are_normalized(self):
        ledger = LiquidityLedger(ReserveState())
        ledger.mint(ALICE.upper().replace("0X", "0x"), 5)
        assert ledger.balance_of(ALICE) == 5

    def test_burn_to_zero_removes_entry(self):
        state = ReserveState()
        ledger = LiquidityLedger(state)
        ledger.mint(ALICE, 100)

        ledger.burn(ALICE, 100)

        assert len(ledger) == 0
        assert ALICE not in ledger.positions()
        assert state.total_liquidity == 0

    def test_burn_more_than_position(self):
        state = ReserveState()
        ledger = LiquidityLedger(state)
        ledger.mint(ALICE, 100)
        ledger.mint(BOB, 100)

        with pytest.raises(InsufficientShares):
            ledger.burn(ALICE, 101)
        assert ledger.balance_of(ALICE) == 100
        assert state.total_liquidity == 200

    def test_burn_unknown_provider(self):
        with pytest.raises(InsufficientShares):
            LiquidityLedger(ReserveState()).burn(BOB, 1)

    @pytest.mark.parametrize("amount", [0, -5])
    def test_non_positive_amounts(self, amount):
        ledger = LiquidityLedger(ReserveState())
        with pytest.raises(ZeroAmount):
            ledger.mint(ALICE, amount)
        with pytest.raises(ZeroAmount):
            ledger.burn(ALICE, amount)

    def test_conservation_violation_detected(self):
        state = ReserveState()
        ledger = LiquidityLedger(state)
        ledger.mint(ALICE, 10)
        state.total_liquidity = 11

        with pytest.raises(InvariantViolation):
            ledger.verify_conservation()

    def test_snapshot_restore(self):
        ledger = LiquidityLedger(ReserveState())
        ledger.mint(ALICE, 10)
        snapshot = ledger.snapshot()
        ledger.mint(BOB, 5)

        ledger.restore(snapshot)

        assert ledger.positions() == {ALICE: 10}
