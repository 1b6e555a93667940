"""Market simulation components."""

from dex_pool.market.retail import RetailOrder, RetailTrader
from dex_pool.market.simulation import PoolSimulation, SimulationResult

__all__ = [
    "RetailOrder",
    "RetailTrader",
    "PoolSimulation",
    "SimulationResult",
]
