"""Pool simulation driven by random retail flow and liquidity events."""

from dataclasses import dataclass, field
from functools import partial
import logging
from typing import Optional

from dex_pool.config import DEFAULT_SIMULATION, SimulationSettings
from dex_pool.core.errors import InsufficientLiquidity, InsufficientMintedClaims, InsufficientOutput
from dex_pool.core.events import LiquidityAdded, LiquidityRemoved, PoolEvent, Swap
from dex_pool.core.pool import Pool, PoolSnapshot
from dex_pool.core.trade import SwapDirection
from dex_pool.custody.memory import InMemoryCustody
from dex_pool.market.retail import RetailTrader

logger = logging.getLogger(__name__)

ASSET_X = "X"
ASSET_Y = "Y"
FOUNDER = "founder"
PROVIDER = "provider"
TRADER = "trader"


@dataclass
class SimulationResult:
    """Summary of a simulation run."""
    seed: Optional[int]
    n_steps: int
    initial: PoolSnapshot
    final: PoolSnapshot
    swaps: int = 0
    rejected_swaps: int = 0
    deposits: int = 0
    withdrawals: int = 0
    volume_x_in: int = 0
    volume_y_in: int = 0
    k_history: list[int] = field(default_factory=list)

    @property
    def k_growth(self) -> int:
        """Increase of the constant product over the run."""
        return self.final.k - self.initial.k


class PoolSimulation:
    """Drives a single pool through random swaps and liquidity changes.

    A founder seeds the pool, a retail trader swaps every step, and a second
    provider occasionally adds or removes liquidity. Pool invariants are
    checked after every step.
    """

    def __init__(
        self,
        settings: SimulationSettings = DEFAULT_SIMULATION,
        seed: Optional[int] = None,
    ):
        self.settings = settings
        self.seed = seed
        self.custody = InMemoryCustody()
        self.pool = Pool(ASSET_X, ASSET_Y, self.custody)
        self.trader = RetailTrader(
            arrival_rate=settings.retail_arrival_rate,
            mean_size=settings.retail_mean_size,
            size_sigma=settings.retail_size_sigma,
            x_to_y_prob=settings.retail_x_to_y_prob,
            seed=seed,
        )

    def _fund(self, account: str, amount_x: int, amount_y: int) -> None:
        self.custody.fund(ASSET_X, account, amount_x)
        self.custody.fund(ASSET_Y, account, amount_y)

    def run(self) -> SimulationResult:
        s = self.settings
        result = SimulationResult(
            seed=self.seed,
            n_steps=s.n_steps,
            initial=self.pool.snapshot(),
            final=self.pool.snapshot(),
        )
        # The pool only retains recent events, so tally them as they happen
        listener = partial(self._record, result)
        self.pool.subscribe(listener)

        self._fund(FOUNDER, s.initial_x, s.initial_y)
        self.pool.deposit(FOUNDER, s.initial_x, s.initial_y)
        result.initial = self.pool.snapshot()

        # Trader and provider are funded generously so flow is never custody-bound
        budget = 10 * max(s.initial_x, s.initial_y)
        self._fund(TRADER, budget, budget)
        self._fund(PROVIDER, budget, budget)

        for step in range(s.n_steps):
            for order in self.trader.generate_orders():
                try:
                    self.pool.swap(TRADER, order.direction, order.amount_in)
                except InsufficientOutput:
                    result.rejected_swaps += 1
            if self.trader.uniform() < s.liquidity_event_prob:
                self._liquidity_event()
            self._verify(step)
            result.k_history.append(self.pool.k)

        self.pool.unsubscribe(listener)
        result.final = self.pool.snapshot()
        logger.info(
            "simulation seed=%s steps=%d swaps=%d k_growth=%d",
            self.seed, s.n_steps, result.swaps, result.k_growth,
        )
        return result

    def _record(self, result: SimulationResult, event: PoolEvent) -> None:
        if isinstance(event, Swap):
            result.swaps += 1
            if event.direction is SwapDirection.X_TO_Y:
                result.volume_x_in += event.amount_in
            else:
                result.volume_y_in += event.amount_in
        elif isinstance(event, LiquidityAdded):
            result.deposits += 1
        elif isinstance(event, LiquidityRemoved):
            result.withdrawals += 1

    def _liquidity_event(self) -> None:
        """Provider withdraws half their claims if they hold any, else deposits."""
        held = self.pool.balance_of(PROVIDER)
        try:
            if held > 0:
                self.pool.withdraw(PROVIDER, max(1, held // 2))
            else:
                reserve_x, reserve_y = self.pool.get_reserves()
                self.pool.deposit(PROVIDER, max(1, reserve_x // 10), max(1, reserve_y // 10))
        except (InsufficientLiquidity, InsufficientMintedClaims) as e:
            logger.debug("liquidity event skipped: %s", e)

    def _verify(self, step: int) -> None:
        snap = self.pool.snapshot()
        active = (snap.reserve_x > 0, snap.reserve_y > 0, snap.total_claims > 0)
        if len(set(active)) != 1:
            raise RuntimeError(f"step {step}: inconsistent pool state {snap}")
        if sum(snap.balances.values()) != snap.total_claims:
            raise RuntimeError(f"step {step}: claim balances do not sum to supply")
        if snap.reserve_x != self.custody.custody_balance(ASSET_X):
            raise RuntimeError(f"step {step}: X reserve diverged from custody")
        if snap.reserve_y != self.custody.custody_balance(ASSET_Y):
            raise RuntimeError(f"step {step}: Y reserve diverged from custody")
