"""Core pool components."""

from dex_pool.core.errors import (
    ArithmeticOverflow,
    InsufficientBalance,
    InsufficientLiquidity,
    InsufficientMintedClaims,
    InsufficientOutput,
    InvalidAmount,
    NoLiquidity,
    PoolError,
    ReentrantCall,
    TransferFailed,
)
from dex_pool.core.events import LiquidityAdded, LiquidityRemoved, Swap
from dex_pool.core.interfaces import AssetCustody
from dex_pool.core.ledger import ClaimLedger
from dex_pool.core.pool import Pool, PoolSnapshot
from dex_pool.core.trade import SwapDirection

__all__ = [
    "ArithmeticOverflow",
    "AssetCustody",
    "ClaimLedger",
    "InsufficientBalance",
    "InsufficientLiquidity",
    "InsufficientMintedClaims",
    "InsufficientOutput",
    "InvalidAmount",
    "LiquidityAdded",
    "LiquidityRemoved",
    "NoLiquidity",
    "Pool",
    "PoolError",
    "PoolSnapshot",
    "ReentrantCall",
    "Swap",
    "SwapDirection",
    "TransferFailed",
]
