"""Events emitted by the pool after each committed state change."""

from enum import Enum

from pydantic import BaseModel, Field

from dex.models.types import Uint256


class SwapDirection(str, Enum):
    """Which asset a swap sells into the pool."""

    A_TO_B = "a_to_b"
    B_TO_A = "b_to_a"


class LiquidityAdded(BaseModel):
    """A provider deposited both assets and received shares."""

    provider: str
    amount_a: Uint256 = Field(alias="amountA", description="Asset A taken into the pool.")
    amount_b: Uint256 = Field(alias="amountB", description="Asset B taken into the pool.")
    liquidity_minted: Uint256 = Field(alias="liquidityMinted")

    model_config = {"populate_by_name": True, "frozen": True}


class LiquidityRemoved(BaseModel):
    """A provider burned shares and received both assets."""

    provider: str
    amount_a: Uint256 = Field(alias="amountA", description="Asset A paid out.")
    amount_b: Uint256 = Field(alias="amountB", description="Asset B paid out.")
    liquidity_burned: Uint256 = Field(alias="liquidityBurned")

    model_config = {"populate_by_name": True, "frozen": True}


class Swap(BaseModel):
    """A trader sold one asset into the pool for the other."""

    trader: str
    direction: SwapDirection
    asset_in: str = Field(alias="assetIn", description="Symbol of the asset sold.")
    asset_out: str = Field(alias="assetOut", description="Symbol of the asset bought.")
    amount_in: Uint256 = Field(alias="amountIn")
    amount_out: Uint256 = Field(alias="amountOut")

    model_config = {"populate_by_name": True, "frozen": True}


PoolEvent = LiquidityAdded | LiquidityRemoved | Swap


class PoolSnapshot(BaseModel):
    """Read-only view of a pool's state."""

    address: str
    asset_a: str = Field(alias="assetA")
    asset_b: str = Field(alias="assetB")
    reserve_a: Uint256 = Field(alias="reserveA")
    reserve_b: Uint256 = Field(alias="reserveB")
    total_liquidity: Uint256 = Field(alias="totalLiquidity")
    price: Uint256 = Field(description="Price of A in B, scaled by priceScale. 0 if empty.")
    price_scale: Uint256 = Field(alias="priceScale")
    fee_bps: int = Field(alias="feeBps")

    model_config = {"populate_by_name": True, "frozen": True}
