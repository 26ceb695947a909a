"""API endpoints for the pool."""

import structlog
from fastapi import APIRouter, Depends, Path, Query

from dex.api.schemas import (
    AddLiquidityRequest,
    PositionResponse,
    PriceResponse,
    QuoteResponse,
    RemoveLiquidityRequest,
    ReservesResponse,
    SwapRequest,
)
from dex.bootstrap import get_default_pool
from dex.models.events import LiquidityAdded, LiquidityRemoved, PoolSnapshot, Swap
from dex.models.types import ADDRESS_PATTERN
from dex.pool import Pool

logger = structlog.get_logger()

router = APIRouter()


def get_pool() -> Pool:
    """Dependency provider for the pool instance.

    Override this in tests to inject a prepared pool:
        app.dependency_overrides[get_pool] = lambda: pool
    """
    return get_default_pool()


@router.get("/pool")
async def pool_state(pool: Pool = Depends(get_pool)) -> PoolSnapshot:
    """Full read-only view of the pool."""
    return pool.snapshot()


@router.get("/reserves")
async def reserves(pool: Pool = Depends(get_pool)) -> ReservesResponse:
    reserve_a, reserve_b = pool.get_reserves()
    return ReservesResponse(reserve_a=reserve_a, reserve_b=reserve_b)


@router.get("/price")
async def price(pool: Pool = Depends(get_pool)) -> PriceResponse:
    """Price of A in B. An empty pool reports 0 rather than an error."""
    return PriceResponse(price=pool.get_price(), price_scale=pool.config.price_scale)


@router.get("/quote")
async def quote(
    amount_in: int = Query(alias="amountIn", ge=0),
    reserve_in: int = Query(alias="reserveIn", ge=0),
    reserve_out: int = Query(alias="reserveOut", ge=0),
    pool: Pool = Depends(get_pool),
) -> QuoteResponse:
    """Simulate a swap against arbitrary reserves using the pool's fee."""
    return QuoteResponse(amount_out=pool.get_amount_out(amount_in, reserve_in, reserve_out))


@router.get("/positions/{provider}")
async def position(
    provider: str = Path(pattern=ADDRESS_PATTERN),
    pool: Pool = Depends(get_pool),
) -> PositionResponse:
    """Share balance of one provider."""
    return PositionResponse(
        provider=provider.lower(),
        shares=pool.liquidity_of(provider),
        total_liquidity=pool.total_liquidity,
    )


@router.post("/liquidity/add")
def add_liquidity(request: AddLiquidityRequest, pool: Pool = Depends(get_pool)) -> LiquidityAdded:
    """Deposit both assets on behalf of request.provider."""
    logger.info(
        "received_add_liquidity",
        provider=request.provider,
        amount_a=request.amount_a,
        amount_b=request.amount_b,
    )
    return pool.add_liquidity(request.provider, request.amount_a, request.amount_b)


@router.post("/liquidity/remove")
def remove_liquidity(
    request: RemoveLiquidityRequest, pool: Pool = Depends(get_pool)
) -> LiquidityRemoved:
    logger.info(
        "received_remove_liquidity",
        provider=request.provider,
        share_amount=request.share_amount,
    )
    return pool.remove_liquidity(request.provider, request.share_amount)


@router.post("/swap")
def swap(request: SwapRequest, pool: Pool = Depends(get_pool)) -> Swap:
    logger.info(
        "received_swap",
        trader=request.trader,
        direction=request.direction.value,
        amount_in=request.amount_in,
    )
    return pool.swap(request.trader, request.direction, request.amount_in, request.min_amount_out)
