"""Request and response bodies for the pool API."""

from pydantic import BaseModel, Field

from dex.models.events import SwapDirection
from dex.models.types import Address, Uint256


class AddLiquidityRequest(BaseModel):
    provider: Address
    amount_a: Uint256 = Field(alias="amountA")
    amount_b: Uint256 = Field(alias="amountB")

    model_config = {"populate_by_name": True}


class RemoveLiquidityRequest(BaseModel):
    provider: Address
    share_amount: Uint256 = Field(alias="shareAmount")

    model_config = {"populate_by_name": True}


class SwapRequest(BaseModel):
    trader: Address
    direction: SwapDirection
    amount_in: Uint256 = Field(alias="amountIn")
    min_amount_out: Uint256 = Field(default=0, alias="minAmountOut")

    model_config = {"populate_by_name": True}


class ReservesResponse(BaseModel):
    reserve_a: Uint256 = Field(alias="reserveA")
    reserve_b: Uint256 = Field(alias="reserveB")

    model_config = {"populate_by_name": True}


class PriceResponse(BaseModel):
    price: Uint256 = Field(description="Price of A in B, scaled. 0 for an empty pool.")
    price_scale: Uint256 = Field(alias="priceScale")

    model_config = {"populate_by_name": True}


class QuoteResponse(BaseModel):
    amount_out: Uint256 = Field(alias="amountOut")

    model_config = {"populate_by_name": True}


class PositionResponse(BaseModel):
    provider: str
    shares: Uint256
    total_liquidity: Uint256 = Field(alias="totalLiquidity")

    model_config = {"populate_by_name": True}


class ErrorResponse(BaseModel):
    error: str = Field(description="Error class name, e.g. InsufficientShares.")
    detail: str
