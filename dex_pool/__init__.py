"""Two-asset constant product pool accounting core."""

from dex_pool.core.errors import PoolError
from dex_pool.core.interfaces import AssetCustody
from dex_pool.core.pool import Pool, PoolSnapshot
from dex_pool.core.trade import SwapDirection
from dex_pool.custody.memory import InMemoryCustody

__all__ = [
    "AssetCustody",
    "InMemoryCustody",
    "Pool",
    "PoolError",
    "PoolSnapshot",
    "SwapDirection",
]
