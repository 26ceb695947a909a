"""Two-asset constant-product liquidity pool."""

from dex.config import DEFAULT_POOL_CONFIG, PoolConfig
from dex.ledger import AssetLedger, InMemoryAssetLedger
from dex.pool import Pool
from dex.pricing import ConstantProductPricing, constant_product

__version__ = "0.1.0"
__all__ = [
    "Pool",
    "PoolConfig",
    "DEFAULT_POOL_CONFIG",
    "ConstantProductPricing",
    "constant_product",
    "AssetLedger",
    "InMemoryAssetLedger",
    "__version__",
]
