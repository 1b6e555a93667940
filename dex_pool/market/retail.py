"""Retail swap flow with Poisson arrivals."""

from dataclasses import dataclass
from typing import Optional

import numpy as np

from dex_pool.core.trade import SwapDirection


@dataclass
class RetailOrder:
    """A retail swap to be executed against the pool."""
    direction: SwapDirection
    amount_in: int  # Gross input in units of the input asset


class RetailTrader:
    """Generates retail swap flow with Poisson arrivals.

    Retail traders arrive according to a Poisson process and submit orders
    of lognormally distributed integer size. They are uninformed and pick a
    direction at random.
    """

    def __init__(
        self,
        arrival_rate: float = 1.0,
        mean_size: float = 1_000.0,
        size_sigma: float = 1.2,
        x_to_y_prob: float = 0.5,
        seed: Optional[int] = None,
    ):
        """
        Args:
            arrival_rate: Expected number of orders per step (lambda)
            mean_size: Mean input size
            size_sigma: Lognormal sigma (log-space)
            x_to_y_prob: Probability an order pays X for Y
            seed: Random seed for reproducibility
        """
        self.arrival_rate = arrival_rate
        self.mean_size = mean_size
        self.size_sigma = size_sigma
        self.x_to_y_prob = x_to_y_prob
        self._rng = np.random.default_rng(seed)

    def reset(self, seed: Optional[int] = None) -> None:
        """Reset the random state."""
        if seed is not None:
            self._rng = np.random.default_rng(seed)

    def generate_orders(self) -> list[RetailOrder]:
        """Generate retail orders for one step (possibly none)."""
        n_arrivals = int(self._rng.poisson(self.arrival_rate))
        if n_arrivals == 0:
            return []

        sigma = max(self.size_sigma, 0.01)
        mean = max(self.mean_size, 1.0)
        mu = float(np.log(mean) - 0.5 * sigma * sigma)

        orders = []
        for _ in range(n_arrivals):
            # Sizes floor to whole units; dust orders still get at least 1
            amount_in = max(1, int(self._rng.lognormal(mu, sigma)))
            if self._rng.random() < self.x_to_y_prob:
                direction = SwapDirection.X_TO_Y
            else:
                direction = SwapDirection.Y_TO_X
            orders.append(RetailOrder(direction=direction, amount_in=amount_in))

        return orders

    def uniform(self) -> float:
        """Draw from U[0, 1) on the trader's stream."""
        return float(self._rng.random())
