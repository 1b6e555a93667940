"""Asset custody interface that hosts implement."""

from abc import ABC, abstractmethod
from typing import Hashable


class AssetCustody(ABC):
    """External collaborator that moves the two traded assets.

    The pool never holds asset balances itself; it asks custody to move
    funds between a participant and the pool's account. Each call either
    fully succeeds (returns True) or changes nothing (returns False). The
    pool treats that result as authoritative and never retries.
    """

    @abstractmethod
    def pull(self, asset: Hashable, source: Hashable, amount: int) -> bool:
        """Move ``amount`` of ``asset`` from ``source`` into pool custody."""
        pass

    @abstractmethod
    def push(self, asset: Hashable, recipient: Hashable, amount: int) -> bool:
        """Move ``amount`` of ``asset`` from pool custody to ``recipient``."""
        pass
