"""Pytest configuration and shared fixtures for pool accounting tests.

This module provides:
- Pytest markers for test categorization
- Fixtures for custody and pools in standard states
"""

import pytest

from dex_pool.core.pool import Pool
from dex_pool.custody.memory import InMemoryCustody
from tests.fixtures.pool_fixtures import (
    create_funded_custody,
    create_pool,
)


# ============================================================================
# Pytest Hooks
# ============================================================================


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "invariant: Pool invariant and property tests over operation sequences"
    )
    config.addinivalue_line(
        "markers", "edge_case: Edge case tests with dust, empty, or extreme inputs"
    )
    config.addinivalue_line(
        "markers", "integration: Integration tests spanning pool, custody, and simulation"
    )
    config.addinivalue_line(
        "markers", "slow: Tests taking more than 5 seconds to run"
    )


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on location and name."""
    for item in items:
        if "edge_case" in item.nodeid or "edge_case" in item.name:
            item.add_marker(pytest.mark.edge_case)

        if "invariant" in item.nodeid:
            item.add_marker(pytest.mark.invariant)

        if any(keyword in item.nodeid for keyword in ["simulation", "concurrency", "cli"]):
            item.add_marker(pytest.mark.integration)


# ============================================================================
# Standard Pool Fixtures
# ============================================================================


@pytest.fixture
def custody() -> InMemoryCustody:
    """Custody where alice, bob, and trader each hold 10**30 of X and Y."""
    return create_funded_custody()


@pytest.fixture
def pool(custody: InMemoryCustody) -> Pool:
    """Empty X/Y pool backed by the ``custody`` fixture."""
    return create_pool(custody)


@pytest.fixture
def seeded_pool(pool: Pool) -> Pool:
    """Pool after alice deposits (1000, 1000): 1000 claims minted."""
    pool.deposit("alice", 1000, 1000)
    return pool
