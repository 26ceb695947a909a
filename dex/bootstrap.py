"""Default pool wiring for the API process.

Builds a pool over two in-memory ledgers ("TKA" and "TKB"). When a deployer
account is given it is funded on both ledgers and the pool is approved to
spend on its behalf, so the API is usable straight away.
"""

import os
import threading

import structlog

from dex.config import PoolConfig
from dex.ledger import InMemoryAssetLedger
from dex.models.types import UINT256_MAX, normalize_address
from dex.pool import Pool

logger = structlog.get_logger()

# 10M whole tokens at 18 decimals
DEPLOYER_MINT_AMOUNT = 10_000_000 * 10**18

_default_pool: Pool | None = None
_default_pool_lock = threading.Lock()


def create_default_pool(
    config: PoolConfig | None = None,
    deployer: str | None = None,
    mint_amount: int = DEPLOYER_MINT_AMOUNT,
) -> Pool:
    """Create a TKA/TKB pool, optionally funding a deployer account.

    Args:
        config: Pool parameters (default: read from the environment)
        deployer: Account to fund and approve on both ledgers
        mint_amount: Amount of each asset minted to the deployer
    """
    token_a = InMemoryAssetLedger("TKA", "Token A")
    token_b = InMemoryAssetLedger("TKB", "Token B")
    pool = Pool(token_a, token_b, config=config or PoolConfig.from_env())

    if deployer:
        deployer = normalize_address(deployer, validate=True)
        for token in (token_a, token_b):
            token.mint(deployer, mint_amount)
            token.approve(deployer, pool.address, UINT256_MAX)

    logger.info(
        "pool_created",
        pool=pool.address,
        asset_a=token_a.symbol,
        asset_b=token_b.symbol,
        fee_bps=pool.config.fee_bps,
        deployer=deployer,
    )
    return pool


def get_default_pool() -> Pool:
    """Return the process-lifetime pool, creating it on first use.

    The deployer is read from DEX_DEPLOYER. Route handlers run in a
    threadpool, so creation happens under a lock and exactly one pool is built.
    """
    global _default_pool
    if _default_pool is None:
        with _default_pool_lock:
            if _default_pool is None:
                _default_pool = create_default_pool(
                    deployer=os.environ.get("DEX_DEPLOYER") or None
                )
    return _default_pool
