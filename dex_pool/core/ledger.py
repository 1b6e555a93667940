"""Claim-token bookkeeping for a single pool."""

from typing import Dict, Hashable, Mapping

from dex_pool.core.errors import InsufficientBalance, InvalidAmount


class ClaimLedger:
    """Maps holder identity to claim balance and tracks the total supply.

    Holders are opaque hashable identities. Zero balances are omitted so the
    ledger only lists current holders.
    """

    def __init__(self) -> None:
        self._balances: Dict[Hashable, int] = {}
        self._total_supply = 0

    @property
    def total_supply(self) -> int:
        return self._total_supply

    def balance_of(self, holder: Hashable) -> int:
        """Claim balance of ``holder``; 0 for unknown holders."""
        return self._balances.get(holder, 0)

    def mint(self, holder: Hashable, amount: int) -> None:
        if amount <= 0:
            raise InvalidAmount(f"mint amount must be > 0, got {amount}")
        self._balances[holder] = self._balances.get(holder, 0) + amount
        self._total_supply += amount

    def burn(self, holder: Hashable, amount: int) -> None:
        if amount <= 0:
            raise InvalidAmount(f"burn amount must be > 0, got {amount}")
        current = self.balance_of(holder)
        if current < amount:
            raise InsufficientBalance(
                f"holder {holder!r} has {current} claims, cannot burn {amount}"
            )
        remaining = current - amount
        if remaining == 0:
            del self._balances[holder]
        else:
            self._balances[holder] = remaining
        self._total_supply -= amount

    def holders(self) -> list:
        return list(self._balances)

    def balances(self) -> Dict[Hashable, int]:
        """Copy of all nonzero balances."""
        return dict(self._balances)

    def restore(self, balances: Mapping[Hashable, int]) -> None:
        """Replace the ledger contents with ``balances`` (used for rollback)."""
        self._balances = {holder: amount for holder, amount in balances.items() if amount}
        self._total_supply = sum(self._balances.values())

    def __len__(self) -> int:
        return len(self._balances)

    def __repr__(self) -> str:
        return f"ClaimLedger({len(self._balances)} holders, supply={self._total_supply})"
