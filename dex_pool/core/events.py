"""Domain events emitted by the pool after each committed operation.

Field order is part of the public contract: indexers consume ``as_tuple()``
positionally.
"""

from dataclasses import astuple, dataclass
from typing import Callable, Hashable, Union

from dex_pool.core.trade import SwapDirection


@dataclass(frozen=True)
class LiquidityAdded:
    """A holder deposited both assets and received claims."""
    holder: Hashable
    amount_x: int
    amount_y: int
    claims_minted: int

    name = "LiquidityAdded"

    def as_tuple(self) -> tuple:
        return astuple(self)


@dataclass(frozen=True)
class LiquidityRemoved:
    """A holder burned claims and received their reserve share."""
    holder: Hashable
    amount_x: int
    amount_y: int
    claims_burned: int

    name = "LiquidityRemoved"

    def as_tuple(self) -> tuple:
        return astuple(self)


@dataclass(frozen=True)
class Swap:
    """A caller traded one asset for the other."""
    caller: Hashable
    amount_in: int
    amount_out: int
    direction: SwapDirection

    name = "Swap"

    def as_tuple(self) -> tuple:
        return astuple(self)


PoolEvent = Union[LiquidityAdded, LiquidityRemoved, Swap]
EventListener = Callable[[PoolEvent], None]
