"""Test helpers module for shared test utilities.

- constants: Account addresses and common amounts
- factories: Pool/ledger builders and balance snapshots
"""

from tests.helpers.constants import ALICE, BOB, CAROL, E18, INITIAL_BALANCE, MALLORY
from tests.helpers.factories import fund, ledger_balances, make_pool

__all__ = [
    # Constants
    "ALICE",
    "BOB",
    "CAROL",
    "MALLORY",
    "E18",
    "INITIAL_BALANCE",
    # Factories
    "make_pool",
    "fund",
    "ledger_balances",
]
