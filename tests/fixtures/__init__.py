"""Test fixtures for pool accounting tests."""

from tests.fixtures.pool_fixtures import (
    ACCOUNTS,
    ASSET_X,
    ASSET_Y,
    FlakyCustody,
    WorldSnapshot,
    assert_pool_consistent,
    create_funded_custody,
    create_pool,
    create_seeded_pool,
    snapshot_world,
)

__all__ = [
    "ACCOUNTS",
    "ASSET_X",
    "ASSET_Y",
    "FlakyCustody",
    "WorldSnapshot",
    "assert_pool_consistent",
    "create_funded_custody",
    "create_pool",
    "create_seeded_pool",
    "snapshot_world",
]
