"""Asset custody implementations."""

from dex_pool.custody.memory import InMemoryCustody

__all__ = [
    "InMemoryCustody",
]
