"""Pool error classes.

Each error rejects a single operation. The pool never retries and never
commits partially: when one of these is raised, reserves, share positions and
custodied balances are exactly as they were before the call.
"""


class PoolError(Exception):
    """Base error for pool operations."""

    pass


class ZeroAmount(PoolError):
    """A required liquidity quantity was zero."""

    pass


class InvalidAmount(PoolError):
    """Swap or quote input was zero or negative."""

    pass


class InsufficientLiquidity(PoolError):
    """Pool has an empty side (or too little output reserve) for the request."""

    pass


class InsufficientShares(PoolError):
    """Withdrawal exceeds the caller's liquidity position."""

    pass


class InsufficientLiquidityMinted(PoolError):
    """Deposit is too small to mint a single share at the current ratio."""

    pass


class InsufficientLiquidityBurned(PoolError):
    """Withdrawal would return zero of one of the assets."""

    pass


class SlippageExceeded(PoolError):
    """Swap output is below the caller's minimum."""

    pass


class TransferFailed(PoolError):
    """Asset ledger refused a transfer (insufficient balance or allowance)."""

    pass


class InvariantViolation(PoolError):
    """A state transition would break a pool invariant."""

    pass


class ReentrantCall(PoolError):
    """A state-changing call entered the pool while another was in progress."""

    pass
