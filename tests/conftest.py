"""Pytest configuration and fixtures."""

import pytest

from dex.pool import Pool
from tests.helpers import ALICE, BOB, fund, make_pool


@pytest.fixture
def pool() -> Pool:
    """Empty TKA/TKB pool with the default 0.3% fee."""
    return make_pool()


@pytest.fixture
def funded_pool(pool: Pool) -> Pool:
    """Empty pool where ALICE and BOB hold and have approved both assets."""
    fund(pool, ALICE)
    fund(pool, BOB)
    return pool


@pytest.fixture
def seeded_pool(funded_pool: Pool) -> Pool:
    """Funded pool with ALICE's initial (100, 200) deposit."""
    funded_pool.add_liquidity(ALICE, 100, 200)
    return funded_pool
