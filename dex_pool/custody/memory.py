"""In-memory fungible asset ledger used as pool custody."""

import logging
import threading
from typing import Dict, Hashable, Tuple

from dex_pool.core.interfaces import AssetCustody

logger = logging.getLogger(__name__)


class InMemoryCustody(AssetCustody):
    """Tracks balances of any number of assets for any number of accounts.

    The pool's holdings are the balances of ``pool_account``. Transfers are
    all-or-nothing: a pull or push that the sender cannot cover changes
    nothing and returns False.
    """

    def __init__(self, pool_account: Hashable = "pool"):
        self.pool_account = pool_account
        self._balances: Dict[Tuple[Hashable, Hashable], int] = {}
        self._lock = threading.Lock()

    def fund(self, asset: Hashable, account: Hashable, amount: int) -> None:
        """Credit ``amount`` of ``asset`` to ``account`` out of thin air."""
        if amount < 0:
            raise ValueError(f"amount must be >= 0, got {amount}")
        with self._lock:
            key = (asset, account)
            self._balances[key] = self._balances.get(key, 0) + amount

    def balance_of(self, asset: Hashable, account: Hashable) -> int:
        return self._balances.get((asset, account), 0)

    def custody_balance(self, asset: Hashable) -> int:
        """Amount of ``asset`` currently held by the pool account."""
        return self.balance_of(asset, self.pool_account)

    def pull(self, asset: Hashable, source: Hashable, amount: int) -> bool:
        return self._transfer(asset, source, self.pool_account, amount)

    def push(self, asset: Hashable, recipient: Hashable, amount: int) -> bool:
        return self._transfer(asset, self.pool_account, recipient, amount)

    def _transfer(self, asset: Hashable, sender: Hashable, recipient: Hashable, amount: int) -> bool:
        if amount <= 0:
            return False
        with self._lock:
            available = self._balances.get((asset, sender), 0)
            if available < amount:
                logger.debug(
                    "transfer of %d %r from %r refused: balance %d",
                    amount, asset, sender, available,
                )
                return False
            self._balances[(asset, sender)] = available - amount
            key = (asset, recipient)
            self._balances[key] = self._balances.get(key, 0) + amount
        return True

    def __repr__(self) -> str:
        return f"InMemoryCustody(pool_account={self.pool_account!r}, {len(self._balances)} balances)"
